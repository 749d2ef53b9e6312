"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from bookingavailability.config import AppConfig, BookingApiConfig


def _write(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "availability.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_defaults():
    config = AppConfig()

    assert config.max_range_days == 31
    assert config.allow_past_start is False
    assert config.display_timezone == "UTC"
    assert config.booking_api is None


def test_load_from_yaml_resolves_data_file(tmp_path):
    config_path = _write(
        tmp_path,
        "data_file: data/tenants.json\n"
        "max_range_days: 14\n"
        "display_timezone: Europe/Berlin\n"
        "log_level: info\n"
        "booking_api:\n"
        "  base_url: http://booking:8080/\n"
        "  timeout_seconds: 5\n",
    )

    config = AppConfig.load_from_yaml(config_path)

    assert config.data_file == tmp_path / "data" / "tenants.json"
    assert config.max_range_days == 14
    assert config.display_timezone == "Europe/Berlin"
    assert config.log_level == "INFO"
    assert config.booking_api.base_url == "http://booking:8080"
    assert config.booking_api.timeout_seconds == 5


def test_empty_file_gives_defaults(tmp_path):
    config = AppConfig.load_from_yaml(_write(tmp_path, ""))

    assert config.data_file == tmp_path / "data.json"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(_write(tmp_path, "max_range_days: [1, 2\n"))


def test_root_must_be_mapping(tmp_path):
    with pytest.raises(ValueError, match="mapping at the root level"):
        AppConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize(
    "field, value",
    [
        ("max_range_days", 0),
        ("max_range_days", 400),
        ("display_timezone", "Mars/Olympus_Mons"),
        ("log_level", "LOUD"),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        AppConfig(**{field: value})


def test_booking_api_requires_http_url():
    with pytest.raises(ValidationError, match="base_url must start with"):
        BookingApiConfig(base_url="booking:8080")


def test_booking_api_timeout_must_be_positive():
    with pytest.raises(ValidationError, match="timeout_seconds"):
        BookingApiConfig(base_url="http://booking", timeout_seconds=0)
