"""Client for the home automation HTTP interface (AHA) of AVM FRITZ!Box routers."""

from .api import AhaSession, create_session_client
from .config import AhaConfig
from .const import HandleBlind, SimpleOnOffTarget
from .exceptions import (
    AhaAuthError,
    AhaClientError,
    AhaDecodeError,
    AhaFunctionNotSupportedError,
    AhaParseError,
    AhaRangeError,
    AhaRequestError,
    AhaUnsupportedChallengeError,
    AhaUnsupportedCommandError,
    AhaValueError,
)
from .models import AIN, SID, EndTimestamp, TemperatureCelsius

__all__ = [
    "AIN",
    "SID",
    "AhaAuthError",
    "AhaClientError",
    "AhaConfig",
    "AhaDecodeError",
    "AhaFunctionNotSupportedError",
    "AhaParseError",
    "AhaRangeError",
    "AhaRequestError",
    "AhaSession",
    "AhaUnsupportedChallengeError",
    "AhaUnsupportedCommandError",
    "AhaValueError",
    "EndTimestamp",
    "HandleBlind",
    "SimpleOnOffTarget",
    "TemperatureCelsius",
    "create_session_client",
]
