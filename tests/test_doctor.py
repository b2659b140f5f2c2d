from __future__ import annotations

from typer.testing import CliRunner

from adapters.coolify_client import CoolifyClient
from cli import doctor
from cli.main import app
from conftest import RecordingTransport, respond
from core.config import AppSettings, write_user_env_vars

runner = CliRunner()


def test_doctor_run_reports_missing_configuration(monkeypatch):
    monkeypatch.setattr(doctor, "_load_settings", lambda: AppSettings(_env_file=None, url=None, token=None))

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "MISSING" in result.stdout
    assert "SKIPPED" in result.stdout


def test_doctor_run_checks_api_health(monkeypatch):
    transport = RecordingTransport(respond(200, {"status": "healthy", "version": "4.0.0"}))
    settings = AppSettings(_env_file=None, url="https://coolify.test", token="tok")
    monkeypatch.setattr(doctor, "_load_settings", lambda: settings)
    monkeypatch.setattr(
        doctor,
        "create_client",
        lambda settings: CoolifyClient(settings.url, settings.token, transport=transport),
    )

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 0
    assert "status=healthy" in result.stdout
    assert transport.last.url.path == "/api/v1/health"


def test_doctor_setup_stores_url_and_token(monkeypatch, tmp_path):
    env_path = tmp_path / ".env"
    monkeypatch.setattr(doctor, "_load_settings", lambda: AppSettings(_env_file=None, url=None, token=None))
    monkeypatch.setattr(doctor, "write_user_env_vars", lambda values: write_user_env_vars(values, env_path=env_path))

    result = runner.invoke(app, ["doctor", "setup"], input="https://coolify.test\nsecret-token\n")

    assert result.exit_code == 0
    content = env_path.read_text(encoding="utf-8")
    assert "COOLIFY_URL=https://coolify.test" in content
    assert "COOLIFY_TOKEN=secret-token" in content
