"""API client for the FRITZ!Box AHA HTTP interface.

This module provides the session that logs on to the gateway, dispatches
commands to the home automation endpoint and decodes their answers.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from types import TracebackType
from typing import Any

import httpx

from . import auth
from .config import AhaConfig
from .const import (
    CMD_APPLY_TEMPLATE,
    CMD_GET_BASIC_DEVICE_STATS,
    CMD_GET_COLOR_DEFAULTS,
    CMD_GET_DEVICE_LIST_INFOS,
    CMD_GET_HKR_ABSENK,
    CMD_GET_HKR_KOMFORT,
    CMD_GET_HKRT_SOLL,
    CMD_GET_SUBSCRIPTION_STATE,
    CMD_GET_SWITCH_ENERGY,
    CMD_GET_SWITCH_LIST,
    CMD_GET_SWITCH_NAME,
    CMD_GET_SWITCH_POWER,
    CMD_GET_SWITCH_PRESENT,
    CMD_GET_SWITCH_STATE,
    CMD_GET_TEMPERATURE,
    CMD_GET_TEMPLATE_LIST_INFOS,
    CMD_GET_TRIGGER_LIST_INFOS,
    CMD_SET_BLIND,
    CMD_SET_COLOR,
    CMD_SET_COLOR_TEMPERATURE,
    CMD_SET_HKR_BOOST,
    CMD_SET_HKR_WINDOW_OPEN,
    CMD_SET_HKRT_SOLL,
    CMD_SET_LEVEL,
    CMD_SET_LEVEL_PERCENTAGE,
    CMD_SET_NAME,
    CMD_SET_SIMPLE_ON_OFF,
    CMD_SET_SWITCH_OFF,
    CMD_SET_SWITCH_ON,
    CMD_SET_SWITCH_TOGGLE,
    CMD_START_ULE_SUBSCRIPTION,
    DEFAULT_HOSTNAME,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    HOMEAUTOSWITCH_PATH,
    LOGIN_PATH,
    MAX_NAME_LENGTH,
    HandleBlind,
    SimpleOnOffTarget,
)
from .decoder import decode_response
from .exceptions import (
    AhaAuthError,
    AhaRangeError,
    AhaRequestError,
    AhaUnsupportedCommandError,
    AhaValueError,
)
from .models import (
    AIN,
    SID,
    ColorDefaults,
    Device,
    DeviceStats,
    DurationMS100,
    EndTimestamp,
    Hue,
    Saturation,
    SessionInfo,
    SubscriptionState,
    TemperatureCelsius,
    TemperatureKelvin,
    Template,
    Trigger,
)
from .xml_mapper import parse_session_info

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_FORBIDDEN = 403


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is 400 or higher, False otherwise.

    """
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates a rejected session.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is 403, False otherwise.

    """
    return status == HTTP_FORBIDDEN


def is_unsupported_command_error(status: int) -> bool:
    """Check if HTTP status code indicates a command unknown to the firmware.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is 400, False otherwise.

    """
    return status == HTTP_BAD_REQUEST


def validate_response(response: httpx.Response) -> str:
    """Validate HTTP response and return its body.

    Args:
        response: HTTP response object to validate.

    Returns:
        The response body as text.

    Raises:
        AhaAuthError: If the gateway rejected the session.
        AhaUnsupportedCommandError: If the firmware does not know the command.
        AhaRequestError: For any other non-success status.

    """
    status = response.status_code
    if not is_http_error(status):
        return response.text

    if is_auth_error(status):
        message = "Authentication error"
        raise AhaAuthError(message, status)

    if is_unsupported_command_error(status):
        message = "Command not supported, a newer firmware is required"
        raise AhaUnsupportedCommandError(message, status)

    message = f"Request failed: {status}"
    raise AhaRequestError(message, status)


def create_session_client(
    verify_ssl: bool = False,  # noqa: FBT001, FBT002
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.Client:
    """Create HTTP client for the FRITZ!Box.

    Args:
        verify_ssl: Whether to verify the gateway certificate.
        timeout: Timeout of a single request in seconds.

    Returns:
        Configured httpx Client.

    """
    return httpx.Client(verify=verify_ssl, timeout=timeout)


def _check_level(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        message = f"{name} must be 0-{maximum}: {value}"
        raise AhaRangeError(message)


class AhaSession:
    """Session with the home automation interface of one FRITZ!Box.

    The session owns the current SID. Every command is a single blocking
    request; nothing is retried and the object is not thread safe.
    """

    def __init__(
        self,
        password: str,
        hostname: str = DEFAULT_HOSTNAME,
        port: int = DEFAULT_PORT,
        username: str = "",
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
        owns_client: bool | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            password: Password of the FRITZ!Box user.
            hostname: Host name or address of the gateway.
            port: HTTPS port of the gateway.
            username: FRITZ!Box user; empty for password-only logins.
            client: HTTP client to use; one is created and owned if omitted.
            clock: Source of the current Unix time.
            owns_client: Whether close() closes the client; defaults to True
                only for a created client.

        """
        self.hostname = hostname
        self.port = port
        self.username = username
        self._password = password
        self._owns_client = client is None if owns_client is None else owns_client
        self._client = client if client is not None else create_session_client()
        self._clock = clock
        self.sid = SID.invalid()
        self.last_access: float | None = None

    @classmethod
    def from_config(
        cls,
        config: AhaConfig,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ) -> AhaSession:
        """Create a session from connection settings.

        Without a client, one honoring verify_ssl and timeout is created and
        closed together with the session.
        """
        owns_client = client is None
        if client is None:
            client = create_session_client(config.verify_ssl, config.timeout)
        return cls(
            password=config.password,
            hostname=config.hostname,
            port=config.port,
            username=config.username,
            client=client,
            clock=clock,
            owns_client=owns_client,
        )

    def __repr__(self) -> str:
        return (
            f"AhaSession(hostname={self.hostname!r}, port={self.port}, "
            f"username={self.username!r}, valid={self.has_valid_session()})"
        )

    def __enter__(self) -> AhaSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        try:
            if self.has_valid_session():
                self.logoff()
        finally:
            self.close()

    def close(self) -> None:
        """Close the HTTP client if the session created it."""
        if self._owns_client:
            self._client.close()

    @property
    def base_url(self) -> str:
        """Return the base URL of the gateway."""
        return f"https://{self.hostname}:{self.port}"

    def _get(self, path: str, params: dict[str, str]) -> str:
        response = self._client.get(f"{self.base_url}{path}", params=params)
        # Any answer counts as an access, including error statuses.
        self.last_access = time.monotonic()
        return validate_response(response)

    def _set_sid(self, sid: SID) -> None:
        if sid != self.sid:
            _LOGGER.debug("Session changed, valid: %s", sid.is_valid_session())
        self.sid = sid

    def has_valid_session(self) -> bool:
        """Return True if the session holds a valid SID."""
        return self.sid.is_valid_session()

    def logon(self) -> bool:
        """Log on with the challenge-response scheme.

        Returns:
            True if the gateway granted a session with at least one right.

        Raises:
            AhaUnsupportedChallengeError: If the gateway sends a PBKDF2
                challenge.
            AhaParseError: If a login answer is malformed.
            AhaRequestError: If the login endpoint fails.

        """
        _LOGGER.debug("Requesting login challenge from %s", self.hostname)
        challenge_info = parse_session_info(
            self._get(LOGIN_PATH, auth.create_challenge_params())
        )
        # The challenge answer carries the current SID, usually the invalid one.
        self._set_sid(challenge_info.sid)
        params = auth.create_login_params(
            challenge_info.challenge, self.username, self._password
        )
        session_info = parse_session_info(self._get(LOGIN_PATH, params))

        if not auth.is_logged_in(session_info):
            self._set_sid(SID.invalid())
            _LOGGER.warning(
                "Login to %s as %r failed", self.hostname, self.username or None
            )
            return False

        self._set_sid(session_info.sid)
        _LOGGER.info("Logged in to %s", self.hostname)
        return True

    def logoff(self) -> bool:
        """Invalidate the session on the gateway.

        Returns:
            True if the gateway confirmed the logout.

        """
        body = self._get(LOGIN_PATH, auth.create_logout_params(self.sid))
        self._set_sid(SID.invalid())
        session_info: SessionInfo = parse_session_info(body)

        if session_info.sid.is_valid_session():
            _LOGGER.warning("Logout from %s was not confirmed", self.hostname)
            return False

        _LOGGER.info("Logged out from %s", self.hostname)
        return True

    def dispatch(self, switchcmd: str, ain: AIN | None = None, **params: Any) -> str:
        """Send a command to the home automation endpoint.

        Args:
            switchcmd: Command name.
            ain: Target device, omitted for commands without a target.
            **params: Additional command parameters.

        Returns:
            The raw response body.

        Raises:
            AhaAuthError: If the gateway rejected the session.
            AhaUnsupportedCommandError: If the firmware does not know the command.
            AhaRequestError: For any other non-success status.

        """
        query: dict[str, str] = {}
        if ain is not None:
            query["ain"] = str(ain)
        query["switchcmd"] = switchcmd
        query.update({key: str(value) for key, value in params.items()})
        query["sid"] = str(self.sid)

        _LOGGER.debug("Sending %s to %s", switchcmd, ain or self.hostname)
        body = self._get(HOMEAUTOSWITCH_PATH, query)
        _LOGGER.debug("Response to %s: %r", switchcmd, body)
        return body

    def _command(self, switchcmd: str, ain: AIN | None = None, **params: Any) -> Any:
        return decode_response(switchcmd, self.dispatch(switchcmd, ain, **params))

    # Outlets

    def get_switch_list(self) -> list[AIN]:
        """Return the AINs of all outlets."""
        return self._command(CMD_GET_SWITCH_LIST)

    def set_switch_on(self, ain: AIN) -> bool:
        """Switch an outlet on and return the new state."""
        return self._command(CMD_SET_SWITCH_ON, ain)

    def set_switch_off(self, ain: AIN) -> bool:
        """Switch an outlet off and return the new state."""
        return self._command(CMD_SET_SWITCH_OFF, ain)

    def set_switch_toggle(self, ain: AIN) -> bool:
        """Toggle an outlet and return the new state."""
        return self._command(CMD_SET_SWITCH_TOGGLE, ain)

    def get_switch_state(self, ain: AIN) -> bool:
        """Return the state of an outlet.

        Raises:
            AhaFunctionNotSupportedError: If the state is unknown.

        """
        return self._command(CMD_GET_SWITCH_STATE, ain)

    def is_switch_present(self, ain: AIN) -> bool:
        """Return True if the outlet is connected."""
        return self._command(CMD_GET_SWITCH_PRESENT, ain)

    def get_switch_power(self, ain: AIN) -> int:
        """Return the current power in mW.

        Raises:
            AhaFunctionNotSupportedError: If the device has no power meter.

        """
        return self._command(CMD_GET_SWITCH_POWER, ain)

    def get_switch_energy(self, ain: AIN) -> int:
        """Return the energy since the last reset in Wh.

        Raises:
            AhaFunctionNotSupportedError: If the device has no power meter.

        """
        return self._command(CMD_GET_SWITCH_ENERGY, ain)

    def get_switch_name(self, ain: AIN) -> str:
        """Return the name of an actor."""
        return self._command(CMD_GET_SWITCH_NAME, ain)

    # Listings

    def get_device_list_infos(self) -> list[Device]:
        """Return all devices and groups known to the gateway."""
        return self._command(CMD_GET_DEVICE_LIST_INFOS)

    def get_basic_device_stats(self, ain: AIN) -> DeviceStats:
        """Return the statistics of a device."""
        return self._command(CMD_GET_BASIC_DEVICE_STATS, ain)

    def get_template_list_infos(self) -> list[Template]:
        """Return all templates configured on the gateway."""
        return self._command(CMD_GET_TEMPLATE_LIST_INFOS)

    def get_trigger_list_infos(self) -> list[Trigger]:
        """Return all triggers configured on the gateway."""
        return self._command(CMD_GET_TRIGGER_LIST_INFOS)

    def apply_template(self, ain: AIN) -> str:
        """Apply a template and return the echoed template id."""
        if not ain.is_template:
            message = f"AIN {ain} does not address a template"
            raise AhaValueError(message)
        return self._command(CMD_APPLY_TEMPLATE, ain)

    # Temperature and radiator controllers

    def get_temperature(self, ain: AIN) -> TemperatureCelsius:
        """Return the measured temperature.

        Raises:
            AhaDecodeError: If the gateway answers with an empty body.

        """
        return self._command(CMD_GET_TEMPERATURE, ain)

    def get_hkrt_soll(self, ain: AIN) -> TemperatureCelsius:
        """Return the target temperature of a radiator controller."""
        return self._command(CMD_GET_HKRT_SOLL, ain)

    def get_hkr_komfort(self, ain: AIN) -> TemperatureCelsius:
        """Return the comfort temperature of a radiator controller."""
        return self._command(CMD_GET_HKR_KOMFORT, ain)

    def get_hkr_absenk(self, ain: AIN) -> TemperatureCelsius:
        """Return the economy temperature of a radiator controller."""
        return self._command(CMD_GET_HKR_ABSENK, ain)

    def set_hkrt_soll(self, ain: AIN, temperature: TemperatureCelsius) -> None:
        """Set the target temperature of a radiator controller.

        0 switches the controller off and 30.0 degrees switches it on.

        Raises:
            AhaRangeError: If the temperature is neither 0, 30.0 nor within
                8.0-28.0 degrees.

        """
        param = temperature.to_hkr()
        self._command(CMD_SET_HKRT_SOLL, ain, param=param)

    def set_hkr_boost(self, ain: AIN, endtimestamp: int) -> int:
        """Enable the boost mode until endtimestamp, 0 disables it.

        Returns:
            The end time confirmed by the gateway.

        Raises:
            AhaRangeError: If endtimestamp is not 0 and not within the next
                24 hours.

        """
        end = EndTimestamp.validate(endtimestamp, self._clock())
        return self._command(CMD_SET_HKR_BOOST, ain, endtimestamp=end.seconds)

    def set_hkr_window_open(self, ain: AIN, endtimestamp: int) -> int:
        """Enable the window-open mode until endtimestamp, 0 disables it.

        Returns:
            The end time confirmed by the gateway.

        Raises:
            AhaRangeError: If endtimestamp is not 0 and not within the next
                24 hours.

        """
        end = EndTimestamp.validate(endtimestamp, self._clock())
        return self._command(CMD_SET_HKR_WINDOW_OPEN, ain, endtimestamp=end.seconds)

    # Lamps, dimmers and other actuators

    def set_simple_on_off(self, ain: AIN, target: SimpleOnOffTarget) -> None:
        """Switch a simple on/off unit."""
        self._command(CMD_SET_SIMPLE_ON_OFF, ain, onoff=int(target))

    def set_level(self, ain: AIN, level: int) -> None:
        """Set the dimming level (0-255)."""
        _check_level("level", level, 255)
        self._command(CMD_SET_LEVEL, ain, level=level)

    def set_level_percentage(self, ain: AIN, level: int) -> None:
        """Set the dimming level in percent."""
        _check_level("level", level, 100)
        self._command(CMD_SET_LEVEL_PERCENTAGE, ain, level=level)

    def set_color(
        self, ain: AIN, hue: int, saturation: int, duration: int = 0
    ) -> None:
        """Set hue and saturation of a color bulb.

        Args:
            ain: Target bulb.
            hue: Hue in degrees (0-359).
            saturation: Saturation (0-255).
            duration: Transition time in 100 ms units.

        Raises:
            AhaRangeError: If an argument is out of range; nothing is sent.

        """
        hue_value = Hue(hue)
        saturation_value = Saturation(saturation)
        duration_value = DurationMS100(duration)
        self._command(
            CMD_SET_COLOR,
            ain,
            hue=hue_value.value,
            saturation=saturation_value.value,
            duration=duration_value.value,
        )

    def set_color_temperature(self, ain: AIN, temperature: int, duration: int = 0) -> None:
        """Set the color temperature (2700-6500 K) of a bulb.

        Raises:
            AhaRangeError: If an argument is out of range; nothing is sent.

        """
        kelvin = TemperatureKelvin(temperature)
        duration_value = DurationMS100(duration)
        self._command(
            CMD_SET_COLOR_TEMPERATURE,
            ain,
            temperature=kelvin.value,
            duration=duration_value.value,
        )

    def get_color_defaults(self, ain: AIN) -> ColorDefaults:
        """Return the color presets of a bulb."""
        return self._command(CMD_GET_COLOR_DEFAULTS, ain)

    def set_blind(self, ain: AIN, target: HandleBlind) -> None:
        """Open, close or stop a blind."""
        self._command(CMD_SET_BLIND, ain, target=target.param)

    def set_name(self, ain: AIN, name: str) -> str:
        """Rename a device and return the name confirmed by the gateway."""
        if not name or len(name) > MAX_NAME_LENGTH:
            message = f"name with wrong length: {len(name)}"
            raise AhaValueError(message)
        return self._command(CMD_SET_NAME, ain, name=name)

    # ULE subscriptions

    def start_ule_subscription(self) -> None:
        """Start the subscription of a new DECT ULE device."""
        self._command(CMD_START_ULE_SUBSCRIPTION)

    def get_subscription_state(self) -> SubscriptionState:
        """Return the state of the running ULE subscription."""
        return self._command(CMD_GET_SUBSCRIPTION_STATE)
