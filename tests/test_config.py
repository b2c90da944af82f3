"""Tests for settings and credentials."""

import pytest

from gmail_mcp.config import Credential, Settings
from gmail_mcp.exceptions import ConfigError


def test_credential_from_mapping():
    credential = Credential.from_mapping({
        "GOOGLE_CLIENT_ID": "cid",
        "GOOGLE_CLIENT_SECRET": "secret",
        "GOOGLE_REFRESH_TOKEN": "refresh",
        "to": "ignored",
    })
    assert credential == Credential("cid", "secret", "refresh")


def test_credential_from_mapping_requires_all_parts():
    with pytest.raises(ConfigError, match="GOOGLE_REFRESH_TOKEN"):
        Credential.from_mapping({"GOOGLE_CLIENT_ID": "cid", "GOOGLE_CLIENT_SECRET": "secret"})


def test_credential_repr_hides_secrets():
    text = repr(Credential("cid", "secret", "refresh"))
    assert "cid" in text
    assert "secret" not in text
    assert "refresh" not in text


def test_settings_from_env():
    settings = Settings.from_env({
        "GOOGLE_CLIENT_ID": "cid",
        "GOOGLE_CLIENT_SECRET": "secret",
        "GOOGLE_REFRESH_TOKEN": "refresh",
        "GMAIL_MCP_TIMEOUT": "12.5",
        "GMAIL_MCP_LOG_LEVEL": "debug",
        "GMAIL_API_BASE": "https://api.test/gmail/v1",
    })
    assert settings.credential() == Credential("cid", "secret", "refresh")
    assert settings.timeout == 12.5
    assert settings.log_level == "DEBUG"
    assert settings.api_base == "https://api.test/gmail/v1"
    assert settings.token_url == "https://oauth2.googleapis.com/token"


def test_settings_incomplete_credential_is_none():
    settings = Settings.from_env({"GOOGLE_CLIENT_ID": "cid"})
    assert settings.credential() is None


def test_settings_rejects_bad_timeout():
    with pytest.raises(ConfigError, match="GMAIL_MCP_TIMEOUT"):
        Settings.from_env({"GMAIL_MCP_TIMEOUT": "soon"})


def test_settings_rejects_unknown_log_level():
    with pytest.raises(ConfigError, match="GMAIL_MCP_LOG_LEVEL"):
        Settings.from_env({"GMAIL_MCP_LOG_LEVEL": "verbose"})


def test_credential_for_fills_each_field_separately():
    settings = Settings(client_id="env-cid", client_secret="env-secret")
    credential = settings.credential_for({
        "GOOGLE_CLIENT_ID": "arg-cid",
        "GOOGLE_REFRESH_TOKEN": "arg-refresh",
    })
    assert credential == Credential("env-cid", "env-secret", "arg-refresh")


def test_credential_for_reports_missing_fields():
    with pytest.raises(ConfigError, match="GOOGLE_CLIENT_SECRET"):
        Settings(client_id="env-cid").credential_for({"GOOGLE_REFRESH_TOKEN": "r"})


def test_settings_reads_process_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "env-cid")
    monkeypatch.delenv("GOOGLE_CLIENT_SECRET", raising=False)
    settings = Settings.from_env()
    assert settings.client_id == "env-cid"
    assert settings.client_secret is None
