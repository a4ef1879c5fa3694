"""Decoding of command endpoint responses.

The gateway signals results differently per command family, and the
differences are kept on purpose:

    * boolean commands read the first character; an empty body is False;
    * getswitchstate, getswitchpower and getswitchenergy translate the
      ``inval`` sentinel into AhaFunctionNotSupportedError;
    * gettemperature and the HKR getters have no sentinel handling, so an
      empty body fails with AhaDecodeError.

RESPONSE_DECODERS maps every switchcmd to the function applied to its body.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

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
    INVAL,
)
from .exceptions import AhaDecodeError, AhaFunctionNotSupportedError
from .models import AIN, TemperatureCelsius
from .xml_mapper import (
    parse_color_defaults,
    parse_device_list,
    parse_device_stats,
    parse_subscription_state,
    parse_template_list,
    parse_trigger_list,
)

_LOGGER = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def strip_newline(body: str) -> str:
    """Remove the single trailing newline the gateway appends to values."""
    return body.removesuffix("\n")


def parse_integer(body: str) -> int:
    """Parse a plain integer body.

    Raises:
        AhaDecodeError: If the body is empty or not a decimal integer.

    """
    value = strip_newline(body)
    if _INTEGER.fullmatch(value) is None:
        message = f"For input string: {value!r}"
        raise AhaDecodeError(message)
    return int(value)


def decode_boolean(body: str) -> bool:
    """Return True if the body starts with "1"; an empty body is False."""
    return body[:1] == "1"


def decode_switch_state(body: str) -> bool:
    """Decode getswitchstate, translating the inval sentinel."""
    if body.startswith(INVAL):
        _LOGGER.debug("Switch state is not supported by the device")
        raise AhaFunctionNotSupportedError(INVAL)
    return decode_boolean(body)


def decode_telemetry(body: str) -> int:
    """Decode getswitchpower (mW) and getswitchenergy (Wh)."""
    value = strip_newline(body)
    if value == INVAL:
        _LOGGER.debug("Telemetry is not supported by the device")
        raise AhaFunctionNotSupportedError(INVAL)
    return parse_integer(value)


def decode_temperature(body: str) -> TemperatureCelsius:
    """Decode gettemperature; the wire value already is deci-Celsius."""
    return TemperatureCelsius(parse_integer(body))


def decode_hkr_temperature(body: str) -> TemperatureCelsius:
    """Decode a radiator controller temperature given in half degrees."""
    return TemperatureCelsius.from_hkr(parse_integer(body))


def decode_ain_list(body: str) -> list[AIN]:
    """Decode a comma separated AIN list; an empty body is an empty list."""
    value = strip_newline(body).strip()
    if not value:
        return []
    return [AIN(ain) for ain in value.split(",")]


def decode_text(body: str) -> str:
    """Return the body without its trailing newline."""
    return strip_newline(body)


def decode_nothing(body: str) -> None:  # noqa: ARG001
    """Ignore the body of commands without a meaningful result."""
    return


RESPONSE_DECODERS: dict[str, Callable[[str], Any]] = {
    CMD_GET_SWITCH_LIST: decode_ain_list,
    CMD_SET_SWITCH_ON: decode_boolean,
    CMD_SET_SWITCH_OFF: decode_boolean,
    CMD_SET_SWITCH_TOGGLE: decode_boolean,
    CMD_GET_SWITCH_PRESENT: decode_boolean,
    CMD_GET_SWITCH_STATE: decode_switch_state,
    CMD_GET_SWITCH_POWER: decode_telemetry,
    CMD_GET_SWITCH_ENERGY: decode_telemetry,
    CMD_GET_SWITCH_NAME: decode_text,
    CMD_GET_DEVICE_LIST_INFOS: parse_device_list,
    CMD_GET_TEMPERATURE: decode_temperature,
    CMD_GET_HKRT_SOLL: decode_hkr_temperature,
    CMD_GET_HKR_KOMFORT: decode_hkr_temperature,
    CMD_GET_HKR_ABSENK: decode_hkr_temperature,
    CMD_SET_HKRT_SOLL: decode_nothing,
    CMD_GET_BASIC_DEVICE_STATS: parse_device_stats,
    CMD_GET_TEMPLATE_LIST_INFOS: parse_template_list,
    CMD_GET_TRIGGER_LIST_INFOS: parse_trigger_list,
    CMD_APPLY_TEMPLATE: decode_text,
    CMD_SET_SIMPLE_ON_OFF: decode_nothing,
    CMD_SET_LEVEL: decode_nothing,
    CMD_SET_LEVEL_PERCENTAGE: decode_nothing,
    CMD_SET_COLOR: decode_nothing,
    CMD_SET_COLOR_TEMPERATURE: decode_nothing,
    CMD_GET_COLOR_DEFAULTS: parse_color_defaults,
    CMD_SET_HKR_BOOST: parse_integer,
    CMD_SET_HKR_WINDOW_OPEN: parse_integer,
    CMD_SET_BLIND: decode_nothing,
    CMD_SET_NAME: decode_text,
    CMD_START_ULE_SUBSCRIPTION: decode_nothing,
    CMD_GET_SUBSCRIPTION_STATE: parse_subscription_state,
}


def decode_response(switchcmd: str, body: str) -> Any:
    """Decode a response body with the policy registered for switchcmd.

    Raises:
        KeyError: If no decoder is registered for switchcmd.

    """
    return RESPONSE_DECODERS[switchcmd](body)
