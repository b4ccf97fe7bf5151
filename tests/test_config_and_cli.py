import json
import math
from datetime import datetime

import httpx
from typer.testing import CliRunner

from adapters.json_exporter import export_json, to_jsonable
from adapters.omeda_client import OmedaApiClient
from adapters.resources import BrandResource
from cli.doctor import app as doctor_app
from cli.main import app
from core.config import AppSettings, write_user_env_vars
from core.domain.models import CustomerEmailEntity


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("OMEDA_APP_ID", "abc")
    monkeypatch.setenv("OMEDA_HTTP_TIMEOUT_SECONDS", "5")
    settings = AppSettings(_env_file=None)
    assert settings.app_id == "abc"
    assert settings.http_timeout_seconds == 5.0
    assert settings.use_staging is False


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"OMEDA_BRAND": "ABC", "OMEDA_APP_ID": "one"}, env_path=env_path)
    write_user_env_vars({"OMEDA_APP_ID": "two", "OMEDA_INPUT_ID": None}, env_path=env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == ["OMEDA_APP_ID=two", "OMEDA_BRAND=ABC"]


def test_export_json_handles_entities_dates_and_nan(tmp_path):
    entity = CustomerEmailEntity({"Id": "x", "ChangedDate": "2020-01-02 03:04:05", "EmailAddress": "a@b.c"})
    path = export_json(payload=[entity], output_path=tmp_path / "out" / "emails.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["Id"] is None
    assert data[0]["ChangedDate"] == "2020-01-02T03:04:05"
    assert to_jsonable({"when": datetime(2020, 1, 1), "n": math.nan}) == {"when": "2020-01-01T00:00:00", "n": None}


def test_cli_get_without_configuration_exits(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(app, ["get", "comp/*"], env={"OMEDA_APP_ID": "", "OMEDA_BRAND": ""})
    assert result.exit_code == 2
    assert "App ID is required" in result.output

CONFIGURED_ENV = {"OMEDA_APP_ID": "app-123", "OMEDA_BRAND": "ABC"}


async def _unreachable(self, method, url, *, headers, content):
    raise httpx.ConnectError("no route")


def test_doctor_reports_unreachable_api(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(OmedaApiClient, "_send", _unreachable)

    result = CliRunner().invoke(doctor_app, ["run"], env=CONFIGURED_ENV)

    assert result.exit_code == 0
    assert "FAIL" in result.output
    assert "no route" in result.output


def test_cli_get_reports_transport_errors(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(OmedaApiClient, "_send", _unreachable)

    result = CliRunner().invoke(app, ["get", "comp/*"], env=CONFIGURED_ENV)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "no route" in result.output


def test_cli_demographics_reports_invalid_json(monkeypatch, tmp_path):
    async def garbled(self, method, url, *, headers, content):
        return httpx.Response(200, headers={"content-type": "application/json"}, content=b"{oops")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(OmedaApiClient, "_send", garbled)

    result = CliRunner().invoke(app, ["demographics"], env=CONFIGURED_ENV)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_cli_demographics_passes_configured_ttl(monkeypatch, tmp_path):
    ttls = []

    class EmptyComp:
        demographics = []

    async def comprehensive_lookup(self, *, ttl=None):
        ttls.append(ttl)
        return EmptyComp()

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(BrandResource, "comprehensive_lookup", comprehensive_lookup)

    result = CliRunner().invoke(app, ["demographics"], env={**CONFIGURED_ENV, "OMEDA_CACHE_TTL_SECONDS": "900"})

    assert result.exit_code == 0
    assert ttls == [900]
