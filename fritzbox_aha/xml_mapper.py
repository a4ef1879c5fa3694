"""Mapping of AHA XML documents to model objects.

The gateway answers listing commands with XML documents whose elements are
present only when a device has the matching capability. Every mapper here
keeps that shape: a missing element becomes None on the model, never a
zero-valued default. Documents carrying a DOCTYPE or ENTITY declaration are
refused before parsing.
"""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from enum import IntEnum
from typing import TypeVar

from .const import (
    APPLY_MASK_ELEMENT_MAP,
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
from .exceptions import AhaParseError, AhaValueError
from .models import (
    AIN,
    SID,
    Alert,
    Blind,
    Button,
    Color,
    ColorControl,
    ColorDefaults,
    Device,
    DeviceStats,
    EtsiUnitInfo,
    GroupInfo,
    Hkr,
    HkrNextChange,
    Hs,
    Hue,
    LevelControl,
    Metadata,
    Powermeter,
    Saturation,
    SessionInfo,
    SimpleOnOff,
    StatsSeries,
    SubscriptionState,
    Switch,
    Temperature,
    TemperatureCelsius,
    TemperatureKelvin,
    Template,
    Trigger,
)

_LOGGER = logging.getLogger(__name__)

_FORBIDDEN_DECLARATION = re.compile(r"<!\s*(DOCTYPE|ENTITY)", re.IGNORECASE)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_STATS_GAP = "-"

_T = TypeVar("_T")
_EnumT = TypeVar("_EnumT", bound=IntEnum)


def parse_document(text: str, expected_root: str) -> ET.Element:
    """Parse an XML document and check its root element.

    Args:
        text: Raw XML text.
        expected_root: Tag name the root element must have.

    Returns:
        The root element.

    Raises:
        AhaParseError: If the document is malformed, declares a DOCTYPE or
            ENTITY, or has an unexpected root element.

    """
    if _FORBIDDEN_DECLARATION.search(text):
        message = "XML documents with DOCTYPE or ENTITY declarations are not accepted"
        raise AhaParseError(message)
    try:
        root = ET.fromstring(text)  # noqa: S314
    except ET.ParseError as err:
        message = f"Malformed XML document: {err}"
        raise AhaParseError(message) from err
    if root.tag != expected_root:
        message = f"Expected <{expected_root}> document, got <{root.tag}>"
        raise AhaParseError(message)
    return root


def _to_int(value: str, what: str) -> int:
    value = value.strip()
    if _INTEGER.fullmatch(value) is None:
        message = f"{what} is not an integer: {value!r}"
        raise AhaParseError(message)
    return int(value)


def _text(elem: ET.Element, tag: str) -> str | None:
    """Return the stripped text of a child element, None if missing or empty."""
    child = elem.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def _int(elem: ET.Element, tag: str) -> int | None:
    text = _text(elem, tag)
    return None if text is None else _to_int(text, tag)


def _required_int(elem: ET.Element, tag: str) -> int:
    value = _int(elem, tag)
    if value is None:
        message = f"<{elem.tag}> without <{tag}>"
        raise AhaParseError(message)
    return value


def _bool(elem: ET.Element, tag: str) -> bool | None:
    value = _int(elem, tag)
    return None if value is None else value == 1


def _attr_int(elem: ET.Element, name: str) -> int | None:
    value = elem.get(name)
    if value is None or not value.strip():
        return None
    return _to_int(value, name)


def _attr_bool(elem: ET.Element, name: str) -> bool:
    return _attr_int(elem, name) == 1


def _int_list(text: str | None, what: str) -> tuple[int, ...]:
    if not text:
        return ()
    return tuple(_to_int(item, what) for item in text.split(","))


def _enum(enum_cls: type[_EnumT], value: int | None) -> _EnumT | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as err:
        message = f"Unknown {enum_cls.__name__} value: {value}"
        raise AhaParseError(message) from err


def _hanfun(enum_cls: type[_EnumT], value: int) -> _EnumT | int:
    # Newer firmware reports unit types and interfaces not in the table yet.
    try:
        return enum_cls(value)
    except ValueError:
        _LOGGER.debug("Unknown %s value %d kept as integer", enum_cls.__name__, value)
        return value


def _hkr_temperature(elem: ET.Element, tag: str) -> TemperatureCelsius | None:
    value = _int(elem, tag)
    return None if value is None else TemperatureCelsius.from_hkr(value)


def _required_hkr_temperature(elem: ET.Element, tag: str) -> TemperatureCelsius:
    return TemperatureCelsius.from_hkr(_required_int(elem, tag))


def _ain_or_none(value: str | None) -> AIN | None:
    return None if value is None else AIN(value)


def parse_session_info(text: str) -> SessionInfo:
    """Parse a <SessionInfo> document of the login endpoint."""
    root = parse_document(text, "SessionInfo")
    sid_text = _text(root, "SID")
    if sid_text is None:
        message = "<SessionInfo> without <SID>"
        raise AhaParseError(message)
    try:
        sid = SID(sid_text)
    except AhaValueError as err:
        raise AhaParseError(str(err)) from err

    rights: dict[str, int] = {}
    rights_elem = root.find("Rights")
    if rights_elem is not None:
        name: str | None = None
        for child in rights_elem:
            if child.tag == "Name":
                name = (child.text or "").strip()
            elif child.tag == "Access" and name is not None:
                rights[name] = _to_int(child.text or "", "Access")
                name = None

    return SessionInfo(
        sid=sid,
        challenge=_text(root, "Challenge") or "",
        block_time=_int(root, "BlockTime") or 0,
        rights=rights,
    )


def _parse_switch(elem: ET.Element) -> Switch:
    return Switch(
        state=_bool(elem, "state"),
        mode=_text(elem, "mode"),
        lock=_bool(elem, "lock"),
        devicelock=_bool(elem, "devicelock"),
    )


def _parse_powermeter(elem: ET.Element) -> Powermeter:
    return Powermeter(
        voltage=_required_int(elem, "voltage"),
        power=_required_int(elem, "power"),
        energy=_required_int(elem, "energy"),
    )


def _parse_temperature(elem: ET.Element) -> Temperature | None:
    celsius = _int(elem, "celsius")
    if celsius is None:
        return None
    return Temperature(celsius=TemperatureCelsius(celsius), offset=_int(elem, "offset"))


def _parse_hkr(elem: ET.Element) -> Hkr:
    nextchange = None
    nextchange_elem = elem.find("nextchange")
    if nextchange_elem is not None:
        endperiod = _int(nextchange_elem, "endperiod")
        tchange = _hkr_temperature(nextchange_elem, "tchange")
        if endperiod is not None and tchange is not None:
            nextchange = HkrNextChange(endperiod=endperiod, tchange=tchange)

    return Hkr(
        tist=_hkr_temperature(elem, "tist"),
        tsoll=_hkr_temperature(elem, "tsoll"),
        absenk=_required_hkr_temperature(elem, "absenk"),
        komfort=_required_hkr_temperature(elem, "komfort"),
        lock=_bool(elem, "lock"),
        devicelock=_bool(elem, "devicelock"),
        errorcode=_enum(HkrErrorCodes, _int(elem, "errorcode") or 0),
        windowopenactive=bool(_bool(elem, "windowopenactiv")),
        windowopenactiveendtime=_int(elem, "windowopenactiveendtime"),
        boostactive=bool(_bool(elem, "boostactive")),
        boostactiveendtime=_int(elem, "boostactiveendtime"),
        batterylow=bool(_bool(elem, "batterylow")),
        battery=_int(elem, "battery"),
        nextchange=nextchange,
        summeractive=bool(_bool(elem, "summeractive")),
        holidayactive=bool(_bool(elem, "holidayactive")),
        adaptive_heating_active=bool(_bool(elem, "adaptiveHeatingActive")),
        adaptive_heating_running=bool(_bool(elem, "adaptiveHeatingRunning")),
    )


def _parse_button(elem: ET.Element) -> Button:
    button_id = _attr_int(elem, "id")
    if button_id is None:
        message = "<button> without id"
        raise AhaParseError(message)
    return Button(
        identifier=_ain_or_none(elem.get("identifier")),
        id=button_id,
        name=_text(elem, "name"),
        lastpressedtimestamp=_int(elem, "lastpressedtimestamp"),
    )


def _parse_levelcontrol(elem: ET.Element) -> LevelControl:
    return LevelControl(
        level=_required_int(elem, "level"),
        levelpercentage=_required_int(elem, "levelpercentage"),
    )


def _parse_colorcontrol(elem: ET.Element) -> ColorControl:
    def optional(tag: str, cls: Callable[[int], _T]) -> _T | None:
        value = _int(elem, tag)
        return None if value is None else cls(value)

    return ColorControl(
        supported_modes=ColorModes.from_bitmask(_attr_int(elem, "supported_modes") or 0),
        current_mode=_enum(ColorModes, _attr_int(elem, "current_mode")),
        fullcolorsupport=_attr_bool(elem, "fullcolorsupport"),
        mapped=_attr_bool(elem, "mapped"),
        hue=optional("hue", Hue),
        saturation=optional("saturation", Saturation),
        unmapped_hue=optional("unmapped_hue", Hue),
        unmapped_saturation=optional("unmapped_saturation", Saturation),
        temperature=optional("temperature", TemperatureKelvin),
    )


def _parse_etsiunitinfo(elem: ET.Element) -> EtsiUnitInfo:
    return EtsiUnitInfo(
        etsideviceid=_required_int(elem, "etsideviceid"),
        unittype=_hanfun(HANFUNUnits, _required_int(elem, "unittype")),
        interfaces=frozenset(
            _hanfun(HANFUNInterfaces, interface)
            for interface in _int_list(_text(elem, "interfaces"), "interfaces")
        ),
    )


def _parse_alert(elem: ET.Element) -> Alert:
    return Alert(
        state=_enum(AlertState, _int(elem, "state")),
        lastalertchgtimestamp=_int(elem, "lastalertchgtimestamp"),
    )


def _parse_blind(elem: ET.Element) -> Blind:
    return Blind(mode=_text(elem, "mode"), endpositionsset=_bool(elem, "endpositionsset"))


def _parse_groupinfo(elem: ET.Element) -> GroupInfo:
    return GroupInfo(
        masterdeviceid=_required_int(elem, "masterdeviceid"),
        members=_int_list(_text(elem, "members"), "members"),
    )


def _parse_humidity(elem: ET.Element) -> int | None:
    humidity = elem.find("humidity")
    return None if humidity is None else _int(humidity, "rel_humidity")


def _parse_simpleonoff(elem: ET.Element) -> SimpleOnOff:
    return SimpleOnOff(state=bool(_bool(elem, "state")))


def _parse_device(elem: ET.Element) -> Device:
    def sub(tag: str, parser: Callable[[ET.Element], _T]) -> _T | None:
        child = elem.find(tag)
        return None if child is None else parser(child)

    bitmask = _attr_int(elem, "functionbitmask")
    buttons = tuple(_parse_button(button) for button in elem.findall("button"))

    return Device(
        identifier=_ain_or_none(elem.get("identifier")),
        id=_attr_int(elem, "id"),
        functionbitmask=None if bitmask is None else Functions.from_bitmask(bitmask),
        fwversion=elem.get("fwversion"),
        manufacturer=elem.get("manufacturer"),
        productname=elem.get("productname"),
        present=bool(_bool(elem, "present")),
        txbusy=bool(_bool(elem, "txbusy")),
        name=_text(elem, "name"),
        batterylow=bool(_bool(elem, "batterylow")),
        battery=_int(elem, "battery"),
        switch=sub("switch", _parse_switch),
        simpleonoff=sub("simpleonoff", _parse_simpleonoff),
        powermeter=sub("powermeter", _parse_powermeter),
        temperature=sub("temperature", _parse_temperature),
        humidity=_parse_humidity(elem),
        hkr=sub("hkr", _parse_hkr),
        buttons=buttons or None,
        levelcontrol=sub("levelcontrol", _parse_levelcontrol),
        colorcontrol=sub("colorcontrol", _parse_colorcontrol),
        etsiunitinfo=sub("etsiunitinfo", _parse_etsiunitinfo),
        alert=sub("alert", _parse_alert),
        blind=sub("blind", _parse_blind),
        groupinfo=sub("groupinfo", _parse_groupinfo),
    )


def parse_device_list(text: str) -> list[Device]:
    """Parse a <devicelist> document into devices and groups.

    Groups whose identifier is not an AIN are skipped with a warning; a
    <device> with a malformed or missing identifier, id or fwversion raises.
    """
    root = parse_document(text, "devicelist")
    devices: list[Device] = []
    for elem in root:
        if elem.tag == "device":
            devices.append(_parse_device(elem))
        elif elem.tag == "group":
            try:
                AIN(elem.get("identifier") or "")
            except AhaValueError:
                _LOGGER.warning(
                    "Skipping group %s: identifier %s is not an AIN",
                    elem.get("id"),
                    elem.get("identifier"),
                )
                continue
            devices.append(_parse_device(elem))
    _LOGGER.debug("Parsed %d devices from device list", len(devices))
    return devices


def _parse_metadata(text: str | None) -> Metadata | None:
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        message = f"Malformed template metadata: {err}"
        raise AhaParseError(message) from err

    icon = data.get("icon", -1)
    scenario = data.get("type")
    scenario_type = ScenarioType.UNDEFINED
    if scenario:
        try:
            scenario_type = ScenarioType[str(scenario).upper()]
        except KeyError as err:
            message = f"Unknown scenario type: {scenario}"
            raise AhaParseError(message) from err
    if icon == -1 and scenario_type is ScenarioType.UNDEFINED:
        return None
    return Metadata(icon=icon, scenario_type=scenario_type)


def _references(elem: ET.Element, container: str, tag: str) -> tuple[AIN, ...]:
    container_elem = elem.find(container)
    if container_elem is None:
        return ()
    return tuple(
        AIN(child.get("identifier", "")) for child in container_elem.findall(tag)
    )


def _parse_applymask(elem: ET.Element) -> frozenset[ApplyMask]:
    entries = ApplyMask.from_bitmask(_attr_int(elem, "applymask") or 0)
    applymask_elem = elem.find("applymask")
    if applymask_elem is None:
        return entries
    listed = {
        APPLY_MASK_ELEMENT_MAP[child.tag]
        for child in applymask_elem
        if child.tag in APPLY_MASK_ELEMENT_MAP
    }
    return entries | frozenset(listed)


def _parse_template(elem: ET.Element) -> Template:
    bitmask = _attr_int(elem, "functionbitmask")
    return Template(
        identifier=_ain_or_none(elem.get("identifier")),
        id=_attr_int(elem, "id"),
        functionbitmask=Functions.from_bitmask(bitmask or 0),
        autocreate=_attr_bool(elem, "autocreate"),
        applymask=_parse_applymask(elem),
        name=_text(elem, "name"),
        metadata=_parse_metadata(_text(elem, "metadata")),
        devices=_references(elem, "devices", "device"),
        triggers=_references(elem, "triggers", "trigger"),
        sub_templates=_references(elem, "sub_templates", "template"),
    )


def parse_template_list(text: str) -> list[Template]:
    """Parse a <templatelist> document."""
    root = parse_document(text, "templatelist")
    return [_parse_template(elem) for elem in root.findall("template")]


def parse_trigger_list(text: str) -> list[Trigger]:
    """Parse a <triggerlist> document."""
    root = parse_document(text, "triggerlist")
    return [
        Trigger(
            identifier=_ain_or_none(elem.get("identifier")),
            name=_text(elem, "name"),
            active=_attr_bool(elem, "active"),
        )
        for elem in root.findall("trigger")
    ]


def _parse_stats(elem: ET.Element) -> StatsSeries:
    values = tuple(
        None if item.strip() == _STATS_GAP else _to_int(item, "stats")
        for item in (elem.text or "").split(",")
        if item.strip()
    )
    return StatsSeries(
        count=_attr_int(elem, "count") or len(values),
        grid=_attr_int(elem, "grid") or 0,
        datatime=_attr_int(elem, "datatime"),
        values=values,
    )


def parse_device_stats(text: str) -> DeviceStats:
    """Parse a <devicestats> document of getbasicdevicestats."""
    root = parse_document(text, "devicestats")

    def series(quantity: str) -> tuple[StatsSeries, ...]:
        quantity_elem = root.find(quantity)
        if quantity_elem is None:
            return ()
        return tuple(_parse_stats(stats) for stats in quantity_elem.findall("stats"))

    return DeviceStats(
        temperature=series("temperature"),
        voltage=series("voltage"),
        power=series("power"),
        energy=series("energy"),
        humidity=series("humidity"),
    )


def _parse_color(elem: ET.Element) -> Color:
    return Color(
        index=_attr_int(elem, "sat_index") or 0,
        hue=Hue(_attr_int(elem, "hue") or 0),
        saturation=Saturation(_attr_int(elem, "sat") or 0),
        value=_attr_int(elem, "val") or 0,
    )


def _parse_hs(elem: ET.Element) -> Hs:
    name_elem = elem.find("name")
    name = "" if name_elem is None else (name_elem.text or "").strip()
    name_enum = 0 if name_elem is None else _attr_int(name_elem, "enum") or 0
    return Hs(
        index=_attr_int(elem, "hue_index") or 0,
        name_enum=name_enum,
        name=name,
        colors=tuple(_parse_color(color) for color in elem.findall("color")),
    )


def parse_color_defaults(text: str) -> ColorDefaults:
    """Parse a <colordefaults> document."""
    root = parse_document(text, "colordefaults")
    return ColorDefaults(
        hs=tuple(_parse_hs(hs) for hs in root.findall("hsdefaults/hs")),
        temperatures=tuple(
            TemperatureKelvin(_attr_int(temp, "value") or 0)
            for temp in root.findall("temperaturedefaults/temp")
        ),
    )


def parse_subscription_state(text: str) -> SubscriptionState:
    """Parse the <state> document of getsubscriptionstate."""
    root = parse_document(text, "state")
    code = _enum(SubscriptionCode, _attr_int(root, "code"))
    if code is None:
        message = "<state> without code"
        raise AhaParseError(message)
    return SubscriptionState(code=code, latest_ain=_ain_or_none(_text(root, "latestain")))
