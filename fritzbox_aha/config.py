"""Connection settings for the FRITZ!Box AHA client."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_HOSTNAME,
    CONF_PASSWORD,
    CONF_PORT,
    CONF_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
    DEFAULT_HOSTNAME,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
)
from .exceptions import AhaValueError

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PASSWORD): str,
        vol.Optional(CONF_HOSTNAME, default=DEFAULT_HOSTNAME): vol.All(
            str, vol.Length(min=1)
        ),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional(CONF_USERNAME, default=""): str,
        vol.Optional(CONF_VERIFY_SSL, default=False): vol.Boolean(),
        vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class AhaConfig:
    """Connection settings of one FRITZ!Box.

    Attributes:
        hostname: Host name or address of the gateway.
        port: HTTPS port of the gateway.
        username: FRITZ!Box user; empty for password-only logins.
        password: Password of the user.
        verify_ssl: Whether to verify the certificate, which is self-signed
            on factory setups.
        timeout: Timeout of a single request in seconds.

    """

    password: str
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    username: str = ""
    verify_ssl: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"AhaConfig(hostname={self.hostname!r}, port={self.port}, "
            f"username={self.username!r}, verify_ssl={self.verify_ssl}, "
            f"timeout={self.timeout})"
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AhaConfig":
        """Create settings from a mapping keyed by the CONF_* constants.

        Args:
            data: Mapping with at least CONF_PASSWORD.

        Returns:
            AhaConfig with defaults for every missing optional key.

        Raises:
            AhaValueError: If the password is missing or a value does not
                match CONFIG_SCHEMA.

        """
        try:
            config = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            message = f"Invalid configuration: {err}"
            raise AhaValueError(message) from err

        return cls(
            password=config[CONF_PASSWORD],
            hostname=config[CONF_HOSTNAME],
            port=config[CONF_PORT],
            username=config[CONF_USERNAME],
            verify_ssl=config[CONF_VERIFY_SSL],
            timeout=config[CONF_TIMEOUT],
        )
