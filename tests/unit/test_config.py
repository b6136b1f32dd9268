"""
Tests unitarios para Settings y el parseo de listas de tablas.
"""
import pytest
from pydantic import ValidationError

from tablebridge.core.config import Settings, parse_table_list
from tablebridge.shared.exceptions.domain import ConfigurationException


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('["customers", "orders"]', ["customers", "orders"]),
        ("customers, orders ,", ["customers", "orders"]),
        ('"customers"', ["customers"]),
        ("", []),
        ("[]", []),
    ],
)
def test_parse_table_list(raw, expected):
    assert parse_table_list(raw) == expected


def test_defaults(monkeypatch):
    for name in ("SYNC_BATCH_SIZE", "SYNC_DIRECTION", "ALLOW_DESTRUCTIVE", "MIRROR_DELETES"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)

    assert s.SYNC_BATCH_SIZE == 1000
    assert s.sync_direction_supported is True
    assert s.ALLOW_DESTRUCTIVE is False
    assert s.MIRROR_DELETES is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SYNC_TABLES", "customers,orders")
    monkeypatch.setenv("ALLOW_DESTRUCTIVE", "true")
    monkeypatch.setenv("SYNC_DIRECTION", "mirror_to_target")

    s = Settings(_env_file=None)

    assert s.sync_tables == ["customers", "orders"]
    assert s.ALLOW_DESTRUCTIVE is True
    assert s.sync_direction_supported is False


@pytest.mark.parametrize("value", [0, -5])
def test_batch_size_must_be_positive(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SYNC_BATCH_SIZE=value)


def test_missing_connection_settings_are_listed():
    s = Settings(_env_file=None, SOURCE_URL="http://x", SOURCE_SERVICE_KEY="", TARGET_DATABASE_URL="")
    with pytest.raises(ConfigurationException) as exc_info:
        s.require_connection_settings()
    assert exc_info.value.missing == ["SOURCE_SERVICE_KEY", "TARGET_DATABASE_URL"]


def test_complete_connection_settings_pass(config):
    config.require_connection_settings()


@pytest.mark.parametrize("raw", ["5", '{"customers": 1}', "true", "null"])
def test_parse_table_list_rejects_non_list_json(raw):
    with pytest.raises(ValueError):
        parse_table_list(raw)


def test_invalid_table_list_fails_at_load(monkeypatch):
    monkeypatch.setenv("SYNC_TABLES", "5")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
