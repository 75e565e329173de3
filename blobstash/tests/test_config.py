"""
@file: test_config.py
@description:
Tests for settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from blobstash.core.config import Settings, get_settings, parse_listen_address


@pytest.mark.parametrize(
    "value, expected",
    [
        ("[::]:2799", ("::", 2799)),
        ("0.0.0.0:8080", ("0.0.0.0", 8080)),
        ("127.0.0.1:0", ("127.0.0.1", 0)),
        ("[::1]:443", ("::1", 443)),
    ],
)
def test_parse_listen_address(value, expected):
    assert parse_listen_address(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", "2799", ":2799", "localhost:2799", "::1:2799", "127.0.0.1:", "127.0.0.1:http", "127.0.0.1:70000"],
)
def test_parse_listen_address_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_listen_address(value)


def test_defaults():
    settings = Settings(_env_file=None, DATABASE_URL="postgresql://localhost/blobs")

    assert settings.CORS_ORIGIN == "*"
    assert settings.LISTEN == "[::]:2799"
    assert settings.listen_host == "::"
    assert settings.listen_port == 2799
    assert settings.CONCURRENCY == 100
    assert settings.LOG_LEVEL == "DEBUG"  # set by the test environment


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/blobs")
    monkeypatch.setenv("CORS_ORIGIN", "https://paste.example")
    monkeypatch.setenv("LISTEN", "127.0.0.1:9000")
    monkeypatch.setenv("CONCURRENCY", "7")

    settings = get_settings()

    assert settings.DATABASE_URL == "postgresql://db/blobs"
    assert settings.CORS_ORIGIN == "https://paste.example"
    assert (settings.listen_host, settings.listen_port) == ("127.0.0.1", 9000)
    assert settings.CONCURRENCY == 7


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("value", ["abc", "1.5", "0", "-3"])
def test_concurrency_must_be_positive_integer(monkeypatch, value):
    monkeypatch.setenv("CONCURRENCY", value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_malformed_listen_is_rejected(monkeypatch):
    monkeypatch.setenv("LISTEN", "not an address")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_cors_origin_must_be_header_safe():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, CORS_ORIGIN="https://a.example\r\nX-Injected: 1")


def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert Settings(_env_file=None).LOG_LEVEL == "WARNING"

    monkeypatch.setenv("LOG_LEVEL", "loud")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
