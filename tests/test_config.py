"""Tests for the connection settings."""

import pytest

from fritzbox_aha.config import AhaConfig
from fritzbox_aha.const import (
    CONF_HOSTNAME,
    CONF_PASSWORD,
    CONF_PORT,
    CONF_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
)
from fritzbox_aha.exceptions import AhaValueError

TEST_PASSWORD = "topSecret"  # noqa: S105


class TestAhaConfig:
    """Tests for AhaConfig."""

    def test_from_mapping_applies_defaults(self) -> None:
        """Test that only the password is required."""
        config = AhaConfig.from_mapping({CONF_PASSWORD: TEST_PASSWORD})
        assert config.hostname == "fritz.box"
        assert config.port == 443
        assert config.username == ""
        assert config.verify_ssl is False
        assert config.timeout == pytest.approx(10.0)

    def test_from_mapping_reads_all_keys(self) -> None:
        """Test that every CONF_* key is read."""
        config = AhaConfig.from_mapping(
            {
                CONF_HOSTNAME: "192.168.178.1",
                CONF_PORT: "8443",
                CONF_USERNAME: "smarthome",
                CONF_PASSWORD: TEST_PASSWORD,
                CONF_VERIFY_SSL: True,
                CONF_TIMEOUT: 3,
            }
        )
        assert config == AhaConfig(
            password=TEST_PASSWORD,
            hostname="192.168.178.1",
            port=8443,
            username="smarthome",
            verify_ssl=True,
            timeout=3.0,
        )

    def test_from_mapping_requires_password(self) -> None:
        """Test that a missing password raises AhaValueError."""
        with pytest.raises(AhaValueError, match="password"):
            AhaConfig.from_mapping({CONF_HOSTNAME: "fritz.box"})

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("false", False), ("off", False), ("0", False), ("true", True), ("on", True)],
    )
    def test_from_mapping_parses_string_booleans(self, value: str, expected: bool) -> None:
        """Test that verify_ssl given as text is parsed, not truth-tested."""
        config = AhaConfig.from_mapping({CONF_PASSWORD: TEST_PASSWORD, CONF_VERIFY_SSL: value})
        assert config.verify_ssl is expected

    @pytest.mark.parametrize(
        "data",
        [
            {CONF_PASSWORD: TEST_PASSWORD, CONF_PORT: 0},
            {CONF_PASSWORD: TEST_PASSWORD, CONF_TIMEOUT: 0},
            {CONF_PASSWORD: TEST_PASSWORD, CONF_VERIFY_SSL: "maybe"},
            {CONF_PASSWORD: 1234},
        ],
    )
    def test_from_mapping_rejects_invalid_values(self, data: dict) -> None:
        """Test that values outside the schema raise AhaValueError."""
        with pytest.raises(AhaValueError, match="Invalid configuration"):
            AhaConfig.from_mapping(data)

    def test_from_mapping_ignores_unknown_keys(self) -> None:
        """Test that keys outside the schema are dropped."""
        config = AhaConfig.from_mapping({CONF_PASSWORD: TEST_PASSWORD, "scan_interval": 30})
        assert config == AhaConfig(password=TEST_PASSWORD)

    def test_from_mapping_rejects_invalid_port(self) -> None:
        """Test that a non-numeric port raises AhaValueError."""
        with pytest.raises(AhaValueError, match="Invalid configuration"):
            AhaConfig.from_mapping({CONF_PASSWORD: TEST_PASSWORD, CONF_PORT: "https"})

    def test_repr_hides_password(self) -> None:
        """Test that the password does not appear in the representation."""
        config = AhaConfig(password=TEST_PASSWORD)
        assert TEST_PASSWORD not in repr(config)

    def test_config_is_frozen(self) -> None:
        """Test that AhaConfig is frozen and cannot be modified."""
        config = AhaConfig(password=TEST_PASSWORD)
        with pytest.raises((AttributeError, TypeError)):
            config.port = 80  # type: ignore[misc]
