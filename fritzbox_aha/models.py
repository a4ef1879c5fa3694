"""Data models for the FRITZ!Box AHA client."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .const import (
    END_TIMESTAMP_WINDOW,
    HKR_MAX_DECI_CELSIUS,
    HKR_MIN_DECI_CELSIUS,
    HKR_OFF,
    HKR_OFF_DECI_CELSIUS,
    HKR_ON,
    HKR_ON_DECI_CELSIUS,
    INVALID_SID,
    MAX_NAME_LENGTH,
    MIN_DECI_CELSIUS,
    AlertState,
    ApplyMask,
    ColorModes,
    Functions,
    HANFUNInterfaces,
    HANFUNUnits,
    HkrErrorCodes,
    ScenarioType,
    SubscriptionCode,
)
from .exceptions import AhaRangeError, AhaValueError

_AIN_PATTERN = re.compile(
    r"(?:"
    r"(?P<device>[0-9]{12})(?P<device_unit>-[0-9]+)?"
    r"|(?P<zigbee>Z[0-9A-Fa-f]{16})(?P<zigbee_unit>-[0-9]+)?"
    r"|(?P<template>tmp[0-9]{6}-[0-9]{3,9})"
    r")"
)
_SID_PATTERN = re.compile(r"[0-9A-Fa-f]{16}")
_WHITESPACE = re.compile(r"\s")


def _check_range(name: str, value: int, minimum: int, maximum: int | None = None) -> None:
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"{minimum}-{maximum}"
        message = f"{name} must be {bounds}: {value}"
        raise AhaRangeError(message)


def _check_name(name: str | None, *, required: bool) -> None:
    if name is None:
        if required:
            message = "name is required"
            raise AhaValueError(message)
        return
    if (required and not name) or len(name) > MAX_NAME_LENGTH:
        message = f"name with wrong length: {len(name)}"
        raise AhaValueError(message)


@dataclass(frozen=True, order=True, slots=True)
class AIN:
    """Actor identification number of a device, unit, Zigbee device or template.

    Whitespace in the raw value is removed before validation, so
    ``AIN("08761 0000434")`` and ``AIN("087610000434")`` are equal.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            message = f"AIN must be a string, got {type(self.value).__name__}"
            raise AhaValueError(message)
        normalized = _WHITESPACE.sub("", self.value)
        if _AIN_PATTERN.fullmatch(normalized) is None:
            message = f"AIN with wrong format: {self.value!r}"
            raise AhaValueError(message)
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse(cls, raw: str) -> AIN:
        """Parse and normalize a raw AIN string."""
        return cls(raw)

    @property
    def is_template(self) -> bool:
        """Return True if the AIN is a template pseudo-identifier."""
        return self.value.startswith("tmp")

    @property
    def is_zigbee(self) -> bool:
        """Return True if the AIN addresses a Zigbee device."""
        return self.value.startswith("Z")

    @property
    def is_unit(self) -> bool:
        """Return True if the AIN addresses a sub-unit of a device."""
        match = _AIN_PATTERN.fullmatch(self.value)
        return bool(match and (match["device_unit"] or match["zigbee_unit"]))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True, slots=True)
class SID:
    """Session identifier issued by the login endpoint."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or _SID_PATTERN.fullmatch(self.value) is None:
            message = f"SID with wrong format: {self.value!r}"
            raise AhaValueError(message)

    @classmethod
    def invalid(cls) -> SID:
        """Return the all-zero "no session" sentinel."""
        return cls(INVALID_SID)

    def is_valid_session(self) -> bool:
        """Return True unless this is the all-zero sentinel."""
        return self.value != INVALID_SID

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True, slots=True)
class TemperatureCelsius:
    """Temperature in deci-Celsius, bounded by absolute zero."""

    deci_celsius: int

    def __post_init__(self) -> None:
        _check_range("temperature", self.deci_celsius, MIN_DECI_CELSIUS)

    @property
    def celsius(self) -> float:
        """Return the temperature in degrees Celsius."""
        return self.deci_celsius / 10

    @classmethod
    def from_hkr(cls, value: int) -> TemperatureCelsius:
        """Decode a radiator controller value given in half degrees.

        253 means "off" and decodes to 0, 254 means "on" and decodes to 300.
        """
        if value == HKR_OFF:
            return cls(HKR_OFF_DECI_CELSIUS)
        if value == HKR_ON:
            return cls(HKR_ON_DECI_CELSIUS)
        return cls((value * 10) // 2)

    def to_hkr(self) -> int:
        """Encode the temperature as a radiator controller setpoint.

        Raises:
            AhaRangeError: If the temperature is neither 0, 300 nor within
                8.0-28.0 degrees Celsius.

        """
        if self.deci_celsius == HKR_OFF_DECI_CELSIUS:
            return HKR_OFF
        if self.deci_celsius == HKR_ON_DECI_CELSIUS:
            return HKR_ON
        if not HKR_MIN_DECI_CELSIUS <= self.deci_celsius <= HKR_MAX_DECI_CELSIUS:
            message = f"Illegal temperature value: {self.deci_celsius}"
            raise AhaRangeError(message)
        return (self.deci_celsius * 2) // 10


@dataclass(frozen=True, order=True, slots=True)
class EndTimestamp:
    """End time of a boost or window-open override in Unix epoch seconds.

    ``0`` cancels the override; any other value must lie within the next
    24 hours of ``now`` at validation time.
    """

    seconds: int

    @classmethod
    def validate(cls, seconds: int, now: float) -> EndTimestamp:
        """Return an EndTimestamp if seconds is 0 or within [now, now+86400]."""
        current = int(now)
        if seconds != 0 and not current <= seconds <= current + END_TIMESTAMP_WINDOW:
            message = "endtimestamp must be 0 or between now and in 24 hours"
            raise AhaRangeError(message)
        return cls(seconds)


@dataclass(frozen=True, order=True, slots=True)
class DurationMS100:
    """Transition duration in units of 100 ms."""

    value: int

    def __post_init__(self) -> None:
        _check_range("duration", self.value, 0)


@dataclass(frozen=True, order=True, slots=True)
class Hue:
    """Hue in degrees."""

    value: int

    def __post_init__(self) -> None:
        _check_range("hue", self.value, 0, 359)


@dataclass(frozen=True, order=True, slots=True)
class Saturation:
    """Color saturation."""

    value: int

    def __post_init__(self) -> None:
        _check_range("saturation", self.value, 0, 255)


@dataclass(frozen=True, order=True, slots=True)
class TemperatureKelvin:
    """Color temperature in Kelvin."""

    value: int

    def __post_init__(self) -> None:
        _check_range("temperature", self.value, 2700, 6500)


@dataclass(frozen=True, slots=True)
class SessionInfo:
    """Represents a <SessionInfo> document of the login endpoint."""

    sid: SID
    challenge: str
    block_time: int
    rights: dict[str, int] = field(default_factory=dict)

    @property
    def has_rights(self) -> bool:
        """Return True if at least one right is granted."""
        return any(access > 0 for access in self.rights.values())


@dataclass(frozen=True, slots=True)
class Switch:
    """State of a switchable outlet."""

    state: bool | None
    mode: str | None
    lock: bool | None
    devicelock: bool | None


@dataclass(frozen=True, slots=True)
class SimpleOnOff:
    """State of a simple on/off unit."""

    state: bool


@dataclass(frozen=True, slots=True)
class Powermeter:
    """Power meter readings.

    Attributes:
        voltage: Voltage in mV.
        power: Power in mW.
        energy: Energy in Wh.

    """

    voltage: int
    power: int
    energy: int

    def __post_init__(self) -> None:
        _check_range("voltage", self.voltage, 0)
        _check_range("power", self.power, 0)
        _check_range("energy", self.energy, 0)


@dataclass(frozen=True, slots=True)
class Temperature:
    """Temperature sensor reading and configured offset."""

    celsius: TemperatureCelsius
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class HkrNextChange:
    """Next scheduled setpoint change of a radiator controller."""

    endperiod: int
    tchange: TemperatureCelsius


@dataclass(frozen=True, slots=True)
class Hkr:
    """Radiator controller state; temperatures are already decoded."""

    tist: TemperatureCelsius | None
    tsoll: TemperatureCelsius | None
    absenk: TemperatureCelsius
    komfort: TemperatureCelsius
    lock: bool | None
    devicelock: bool | None
    errorcode: HkrErrorCodes
    windowopenactive: bool
    windowopenactiveendtime: int | None
    boostactive: bool
    boostactiveendtime: int | None
    batterylow: bool
    battery: int | None
    nextchange: HkrNextChange | None
    summeractive: bool
    holidayactive: bool
    adaptive_heating_active: bool
    adaptive_heating_running: bool


@dataclass(frozen=True, slots=True)
class Button:
    """Button of a remote control or wall switch."""

    identifier: AIN | None
    id: int
    name: str | None
    lastpressedtimestamp: int | None

    def __post_init__(self) -> None:
        _check_range("id", self.id, 0)
        _check_name(self.name, required=False)


@dataclass(frozen=True, slots=True)
class LevelControl:
    """Dimming level, absolute (0-255) and in percent."""

    level: int
    levelpercentage: int

    def __post_init__(self) -> None:
        _check_range("level", self.level, 0, 255)
        _check_range("levelpercentage", self.levelpercentage, 0, 100)


@dataclass(frozen=True, slots=True)
class ColorControl:
    """Color state of a bulb."""

    supported_modes: frozenset[ColorModes]
    current_mode: ColorModes | None
    fullcolorsupport: bool
    mapped: bool
    hue: Hue | None
    saturation: Saturation | None
    unmapped_hue: Hue | None
    unmapped_saturation: Saturation | None
    temperature: TemperatureKelvin | None


@dataclass(frozen=True, slots=True)
class EtsiUnitInfo:
    """HAN-FUN unit description."""

    etsideviceid: int
    unittype: HANFUNUnits | int
    interfaces: frozenset[HANFUNInterfaces | int]

    def __post_init__(self) -> None:
        _check_range("etsideviceid", self.etsideviceid, 0)


@dataclass(frozen=True, slots=True)
class Alert:
    """Alert sensor state."""

    state: AlertState | None
    lastalertchgtimestamp: int | None


@dataclass(frozen=True, slots=True)
class Blind:
    """Blind configuration."""

    mode: str | None
    endpositionsset: bool | None


@dataclass(frozen=True, slots=True)
class GroupInfo:
    """Members of a device group."""

    masterdeviceid: int
    members: tuple[int, ...]

    def __post_init__(self) -> None:
        _check_range("masterdeviceid", self.masterdeviceid, 0)
        if not self.members:
            message = "members without any member"
            raise AhaValueError(message)


@dataclass(frozen=True, slots=True)
class Device:
    """A device (or group) of a <devicelist> document.

    Only identifier, id, functionbitmask and fwversion are mandatory; every
    sub-structure is None when the device lacks the capability.
    """

    identifier: AIN
    id: int
    functionbitmask: frozenset[Functions]
    fwversion: str
    manufacturer: str | None = None
    productname: str | None = None
    present: bool = False
    txbusy: bool = False
    name: str | None = None
    batterylow: bool = False
    battery: int | None = None
    switch: Switch | None = None
    simpleonoff: SimpleOnOff | None = None
    powermeter: Powermeter | None = None
    temperature: Temperature | None = None
    humidity: int | None = None
    hkr: Hkr | None = None
    buttons: tuple[Button, ...] | None = None
    levelcontrol: LevelControl | None = None
    colorcontrol: ColorControl | None = None
    etsiunitinfo: EtsiUnitInfo | None = None
    alert: Alert | None = None
    blind: Blind | None = None
    groupinfo: GroupInfo | None = None

    def __post_init__(self) -> None:
        if self.identifier is None:
            message = "identifier is required"
            raise AhaValueError(message)
        if self.id is None:
            message = "id is required"
            raise AhaValueError(message)
        _check_range("id", self.id, 0)
        if not self.fwversion:
            message = "fwversion is required"
            raise AhaValueError(message)
        if self.functionbitmask is None:
            object.__setattr__(self, "functionbitmask", frozenset())
        if self.battery is not None:
            _check_range("battery", self.battery, 0, 100)


@dataclass(frozen=True, slots=True)
class Metadata:
    """Template metadata: either an icon or a scenario type."""

    icon: int = -1
    scenario_type: ScenarioType = ScenarioType.UNDEFINED

    def __post_init__(self) -> None:
        _check_range("icon", self.icon, -1)
        if self.icon == -1 and self.scenario_type is ScenarioType.UNDEFINED:
            message = "One of icon or type must be set"
            raise AhaValueError(message)
        if self.icon >= 0 and self.scenario_type is not ScenarioType.UNDEFINED:
            message = "Only one of icon or type must be set"
            raise AhaValueError(message)


@dataclass(frozen=True, slots=True)
class Template:
    """A template of a <templatelist> document."""

    identifier: AIN
    id: int
    functionbitmask: frozenset[Functions]
    autocreate: bool
    applymask: frozenset[ApplyMask]
    name: str
    metadata: Metadata | None = None
    devices: tuple[AIN, ...] = ()
    triggers: tuple[AIN, ...] = ()
    sub_templates: tuple[AIN, ...] = ()

    def __post_init__(self) -> None:
        if self.identifier is None:
            message = "identifier is required"
            raise AhaValueError(message)
        if self.id is None:
            message = "id is required"
            raise AhaValueError(message)
        _check_range("id", self.id, 0)
        _check_name(self.name, required=True)


@dataclass(frozen=True, slots=True)
class Trigger:
    """A trigger of a <triggerlist> document."""

    identifier: AIN
    name: str
    active: bool

    def __post_init__(self) -> None:
        if self.identifier is None:
            message = "identifier is required"
            raise AhaValueError(message)
        _check_name(self.name, required=True)


@dataclass(frozen=True, slots=True)
class StatsSeries:
    """One statistics series of getbasicdevicestats; None marks a gap."""

    count: int
    grid: int
    datatime: int | None
    values: tuple[int | None, ...]


@dataclass(frozen=True, slots=True)
class DeviceStats:
    """Statistics of a device grouped by quantity."""

    temperature: tuple[StatsSeries, ...] = ()
    voltage: tuple[StatsSeries, ...] = ()
    power: tuple[StatsSeries, ...] = ()
    energy: tuple[StatsSeries, ...] = ()
    humidity: tuple[StatsSeries, ...] = ()


@dataclass(frozen=True, slots=True)
class Color:
    """A default color of a hue/saturation preset."""

    index: int
    hue: Hue
    saturation: Saturation
    value: int

    def __post_init__(self) -> None:
        _check_range("index", self.index, 1, 3)
        _check_range("value", self.value, 0, 255)


@dataclass(frozen=True, slots=True)
class Hs:
    """Hue preset with its three default colors."""

    index: int
    name_enum: int
    name: str
    colors: tuple[Color, ...]

    def __post_init__(self) -> None:
        _check_range("index", self.index, 1, 12)
        _check_range("name_enum", self.name_enum, 0)
        if len(self.colors) != 3:  # noqa: PLR2004
            message = "colors must have 3 entries"
            raise AhaValueError(message)


@dataclass(frozen=True, slots=True)
class ColorDefaults:
    """Color presets supported by the gateway."""

    hs: tuple[Hs, ...]
    temperatures: tuple[TemperatureKelvin, ...]


@dataclass(frozen=True, slots=True)
class SubscriptionState:
    """State of a ULE device subscription."""

    code: SubscriptionCode
    latest_ain: AIN | None = None
