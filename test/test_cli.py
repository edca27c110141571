import dataclasses
import json

import httpx
import pytest

from storefront_data import cli
from storefront_data.cli import main
from storefront_data.config import DEFAULT_POSTGREST_URL, Settings
from storefront_data.service import PostgresService, create_postgres_service


def test_create_service_from_env_mapping():
    service = create_postgres_service({
        "POSTGREST_URL": "https://db.example.com/rest/v1/",
        "POSTGREST_API_KEY": "k",
        "POSTGREST_TIMEOUT": "2.5",
    })
    with service:
        assert service.client.base_url == "https://db.example.com/rest/v1"
        assert service.client.api_key == "k"
        assert service.client.session.timeout.read == 2.5


def test_create_service_defaults():
    with create_postgres_service({}) as service:
        assert service.client.base_url == DEFAULT_POSTGREST_URL
        assert service.client.api_key is None


def test_settings_are_frozen():
    cfg = Settings()
    assert cfg.postgrest_url
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.postgrest_url = "x"


def _service(handler):
    return PostgresService("http://postgrest.test", transport=httpx.MockTransport(handler))


def test_cli_review_stats(capsys):
    rows = [{"rating": 5}, {"rating": 3}]
    code = main(["review-stats", "--handle", "blue-mug"],
                service=_service(lambda request: httpx.Response(200, json=rows)))

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"total": 2, "average": 4.0, "ratings": {"1": 0, "2": 0, "3": 1, "4": 0, "5": 1}}


def test_cli_set_return_status(capsys):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": 3, "order_id": "o", "status": "approved"}])

    code = main(["set-return-status", "3", "approved"], service=_service(handler))

    assert code == 0
    assert seen[0].method == "PATCH"
    assert seen[0].url.params["id"] == "eq.3"
    assert json.loads(capsys.readouterr().out)[0]["status"] == "approved"


def test_cli_missing_return_prints_null(capsys):
    code = main(["return", "404"], service=_service(lambda request: httpx.Response(200, json=[])))
    assert code == 0
    assert capsys.readouterr().out.strip() == "null"


def test_cli_reports_store_errors(capsys):
    code = main(["returns-by-order", "o-1"],
                service=_service(lambda request: httpx.Response(503, text="down")))
    assert code == 1
    assert capsys.readouterr().out == ""


def test_cli_reports_unreachable_store(caplog):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    code = main(["reviews", "--handle", "h"], service=_service(handler))

    assert code == 1
    assert "refused" in caplog.text


def test_cli_rejects_negative_limit(capsys):
    code = main(["reviews", "--handle", "h", "--limit", "-1"],
                service=_service(lambda request: httpx.Response(200, json=[])))
    assert code == 1
    assert capsys.readouterr().out == ""


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setattr(cli, "CFG", Settings(log_level="TRACE"))

    args = cli.build_parser().parse_args(["review-stats", "--handle", "h"])

    assert args.log_level == "INFO"
    cli.setup_logging("TRACE")


def test_zero_timeout_is_kept(monkeypatch):
    monkeypatch.setattr(cli, "CFG", Settings(request_timeout=0.0))
    args = cli.build_parser().parse_args(["review-stats", "--handle", "h"])

    with cli.service_from_args(args) as service:
        assert service.client.session.timeout.read == 0.0
