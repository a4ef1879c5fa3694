"""Tests for the XML document mappers."""

import logging

import pytest

from fritzbox_aha import xml_mapper
from fritzbox_aha.const import (
    ApplyMask,
    ColorModes,
    Functions,
    HANFUNInterfaces,
    HANFUNUnits,
    HkrErrorCodes,
    ScenarioType,
    SubscriptionCode,
)
from fritzbox_aha.exceptions import AhaParseError, AhaValueError
from fritzbox_aha.models import (
    AIN,
    SID,
    Hue,
    Saturation,
    TemperatureCelsius,
    TemperatureKelvin,
)

EXPECTED_DEVICE_COUNT = 4


class TestParseDocument:
    """Tests for parse_document function."""

    def test_parse_document_rejects_doctype(self) -> None:
        """Test that documents declaring a DOCTYPE are refused."""
        text = (
            '<?xml version="1.0"?><!DOCTYPE devicelist '
            '[<!ENTITY xxe SYSTEM "file:///etc/passwd">]>'
            "<devicelist>&xxe;</devicelist>"
        )
        with pytest.raises(AhaParseError, match="DOCTYPE or ENTITY"):
            xml_mapper.parse_document(text, "devicelist")

    def test_parse_document_rejects_malformed_xml(self) -> None:
        """Test that malformed documents raise a parse error."""
        with pytest.raises(AhaParseError, match="Malformed XML"):
            xml_mapper.parse_document("<devicelist><device>", "devicelist")

    def test_parse_document_rejects_unexpected_root(self) -> None:
        """Test that documents with another root element are refused."""
        with pytest.raises(AhaParseError, match="Expected <devicelist>"):
            xml_mapper.parse_document("<templatelist/>", "devicelist")


class TestParseSessionInfo:
    """Tests for parse_session_info function."""

    def test_parse_session_info_reads_rights(self) -> None:
        """Test that rights are paired by name and access level."""
        info = xml_mapper.parse_session_info(
            "<SessionInfo><SID>0000000000004711</SID><Challenge>deadbeef</Challenge>"
            "<BlockTime>0</BlockTime><Rights><Name>Dial</Name><Access>2</Access>"
            "<Name>App</Name><Access>0</Access></Rights></SessionInfo>"
        )
        assert info.sid == SID("0000000000004711")
        assert info.challenge == "deadbeef"
        assert info.block_time == 0
        assert info.rights == {"Dial": 2, "App": 0}
        assert info.has_rights is True

    def test_parse_session_info_without_rights(self) -> None:
        """Test that an empty <Rights> element grants nothing."""
        info = xml_mapper.parse_session_info(
            "<SessionInfo><SID>0000000000000000</SID><Challenge>deadbeef</Challenge>"
            "<BlockTime>32</BlockTime><Rights/></SessionInfo>"
        )
        assert info.sid.is_valid_session() is False
        assert info.block_time == 32
        assert info.has_rights is False

    @pytest.mark.parametrize(
        "text",
        [
            "<SessionInfo><Challenge>deadbeef</Challenge></SessionInfo>",
            "<SessionInfo><SID>4711</SID></SessionInfo>",
        ],
    )
    def test_parse_session_info_requires_sid(self, text: str) -> None:
        """Test that a missing or malformed SID raises a parse error."""
        with pytest.raises(AhaParseError):
            xml_mapper.parse_session_info(text)


class TestParseDeviceList:
    """Tests for parse_device_list function."""

    def test_parse_device_list_skips_groups_without_ain(
        self, device_list_xml: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that groups outside the AIN space are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            devices = xml_mapper.parse_device_list(device_list_xml)
        assert len(devices) == EXPECTED_DEVICE_COUNT
        assert [device.id for device in devices] == [17, 16, 2001, 900]
        assert "Skipping group 901" in caplog.text

    def test_parse_device_list_maps_outlet(self, device_list_xml: str) -> None:
        """Test that an outlet is mapped with its sub-structures."""
        outlet = xml_mapper.parse_device_list(device_list_xml)[0]
        assert outlet.identifier == AIN("087610000434")
        assert outlet.fwversion == "04.16"
        assert outlet.productname == "FRITZ!DECT 200"
        assert outlet.present is True
        assert outlet.name == "Steckdose"
        assert Functions.AVM_SWITCHSOCKET in outlet.functionbitmask
        assert Functions.AVM_ENERGY_GAUGE in outlet.functionbitmask
        assert Functions.AVM_RADIATOR_CONTROLLER not in outlet.functionbitmask
        assert outlet.switch is not None
        assert outlet.switch.state is True
        assert outlet.switch.mode == "manuell"
        assert outlet.switch.devicelock is True
        assert outlet.powermeter is not None
        assert outlet.powermeter.voltage == 230051
        assert outlet.powermeter.power == 4500
        assert outlet.powermeter.energy == 2087
        assert outlet.temperature is not None
        assert outlet.temperature.celsius == TemperatureCelsius(255)

    def test_parse_device_list_leaves_absent_capabilities_none(
        self, device_list_xml: str
    ) -> None:
        """Test that missing sub-structures are None, not defaults."""
        outlet = xml_mapper.parse_device_list(device_list_xml)[0]
        assert outlet.hkr is None
        assert outlet.levelcontrol is None
        assert outlet.colorcontrol is None
        assert outlet.etsiunitinfo is None
        assert outlet.alert is None
        assert outlet.blind is None
        assert outlet.groupinfo is None
        assert outlet.buttons is None
        assert outlet.humidity is None
        assert outlet.battery is None

    def test_parse_device_list_decodes_hkr_scale(self, device_list_xml: str) -> None:
        """Test that radiator controller temperatures are decoded."""
        radiator = xml_mapper.parse_device_list(device_list_xml)[1]
        hkr = radiator.hkr
        assert hkr is not None
        assert hkr.tist == TemperatureCelsius(210)
        assert hkr.tsoll == TemperatureCelsius(0)
        assert hkr.absenk == TemperatureCelsius(160)
        assert hkr.komfort == TemperatureCelsius(210)
        assert hkr.errorcode is HkrErrorCodes.NO_ERROR
        assert hkr.boostactive is True
        assert hkr.boostactiveendtime == 1700003600
        assert hkr.windowopenactive is False
        assert hkr.adaptive_heating_active is True
        assert hkr.nextchange is not None
        assert hkr.nextchange.endperiod == 1700010000
        assert hkr.nextchange.tchange == TemperatureCelsius(160)
        assert radiator.battery == 80
        assert radiator.temperature is not None
        assert radiator.temperature.offset == -5

    def test_parse_device_list_maps_color_bulb(self, device_list_xml: str) -> None:
        """Test that level, color and HAN-FUN information is mapped."""
        bulb = xml_mapper.parse_device_list(device_list_xml)[2]
        assert bulb.identifier.is_unit
        assert bulb.simpleonoff is not None
        assert bulb.simpleonoff.state is False
        assert bulb.levelcontrol is not None
        assert bulb.levelcontrol.level == 26
        assert bulb.levelcontrol.levelpercentage == 10
        color = bulb.colorcontrol
        assert color is not None
        assert color.supported_modes == {ColorModes.HUE_SATURATION, ColorModes.COLOR_TEMPERATURE}
        assert color.current_mode is ColorModes.HUE_SATURATION
        assert color.fullcolorsupport is True
        assert color.mapped is False
        assert color.hue == Hue(120)
        assert color.saturation == Saturation(200)
        assert color.unmapped_hue is None
        assert color.temperature is None
        unit = bulb.etsiunitinfo
        assert unit is not None
        assert unit.etsideviceid == 406
        assert unit.unittype is HANFUNUnits.DIMMABLE_COLOR_BULB
        assert unit.interfaces == {
            HANFUNInterfaces.ON_OFF,
            HANFUNInterfaces.COLOR_CTRL,
            HANFUNInterfaces.LEVEL_CTRL,
            9999,
        }

    def test_parse_device_list_maps_group(self, device_list_xml: str) -> None:
        """Test that groups addressed by AIN carry their members."""
        group = xml_mapper.parse_device_list(device_list_xml)[3]
        assert group.identifier == AIN("654321234567")
        assert group.groupinfo is not None
        assert group.groupinfo.masterdeviceid == 17
        assert group.groupinfo.members == (17, 16)

    def test_parse_device_list_requires_fwversion(self) -> None:
        """Test that a device without fwversion raises."""
        text = (
            '<devicelist><device identifier="087610000434" id="1" functionbitmask="0">'
            "<present>1</present></device></devicelist>"
        )
        with pytest.raises(AhaValueError, match="fwversion is required"):
            xml_mapper.parse_device_list(text)

    def test_parse_device_list_requires_identifier(self) -> None:
        """Test that a device without identifier raises."""
        text = '<devicelist><device id="1" functionbitmask="0" fwversion="1.0"/></devicelist>'
        with pytest.raises(AhaValueError, match="identifier is required"):
            xml_mapper.parse_device_list(text)

    def test_parse_device_list_rejects_malformed_identifier(self) -> None:
        """Test that a device with a malformed AIN raises."""
        text = '<devicelist><device identifier="4711" id="1" fwversion="1.0"/></devicelist>'
        with pytest.raises(AhaValueError, match="AIN with wrong format"):
            xml_mapper.parse_device_list(text)

    def test_parse_device_list_without_functionbitmask(self) -> None:
        """Test that a missing functionbitmask becomes an empty set."""
        text = '<devicelist><device identifier="087610000434" id="1" fwversion="1.0"/></devicelist>'
        (device,) = xml_mapper.parse_device_list(text)
        assert device.functionbitmask == frozenset()
        assert device.present is False


class TestParseTemplateList:
    """Tests for parse_template_list function."""

    def test_parse_template_list(self, template_list_xml: str) -> None:
        """Test that templates are mapped with metadata and references."""
        first, second = xml_mapper.parse_template_list(template_list_xml)

        assert first.identifier == AIN("tmp123456-391234567")
        assert first.id == 60000
        assert first.name == "Heizen Abwesend"
        assert first.autocreate is False
        assert first.functionbitmask == {
            Functions.AVM_RADIATOR_CONTROLLER,
            Functions.TEMPERATURE_SENSOR,
        }
        assert first.applymask == {
            ApplyMask.HKR_TEMPERATURE,
            ApplyMask.HKR_TIME_TABLE,
            ApplyMask.HKR_HOLIDAYS,
            ApplyMask.RELAY_AUTOMATIC,
        }
        assert first.metadata is not None
        assert first.metadata.icon == 3
        assert first.devices == (AIN("099950000111"),)
        assert first.triggers == ()
        assert first.sub_templates == ()

        assert second.autocreate is True
        assert second.applymask == {ApplyMask.SUB_TEMPLATES}
        assert second.metadata is not None
        assert second.metadata.scenario_type is ScenarioType.LEAVING
        assert second.sub_templates == (AIN("tmp123456-391234567"),)
        assert second.triggers == (AIN("tmp111111-222"),)

    def test_parse_template_list_requires_name(self) -> None:
        """Test that a template without name raises."""
        text = '<templatelist><template identifier="tmp123456-123" id="1"/></templatelist>'
        with pytest.raises(AhaValueError, match="name is required"):
            xml_mapper.parse_template_list(text)

    def test_parse_template_list_rejects_malformed_metadata(self) -> None:
        """Test that metadata which is not JSON raises a parse error."""
        text = (
            '<templatelist><template identifier="tmp123456-123" id="1">'
            "<name>Test</name><metadata>{icon</metadata></template></templatelist>"
        )
        with pytest.raises(AhaParseError, match="metadata"):
            xml_mapper.parse_template_list(text)


class TestParseTriggerList:
    """Tests for parse_trigger_list function."""

    def test_parse_trigger_list(self, trigger_list_xml: str) -> None:
        """Test that triggers are mapped with their active flag."""
        morning, evening = xml_mapper.parse_trigger_list(trigger_list_xml)
        assert morning.identifier == AIN("tmp111111-222")
        assert morning.name == "Morgens"
        assert morning.active is True
        assert evening.active is False


class TestParseDeviceStats:
    """Tests for parse_device_stats function."""

    def test_parse_device_stats(self, device_stats_xml: str) -> None:
        """Test that statistic series are mapped and gaps become None."""
        stats = xml_mapper.parse_device_stats(device_stats_xml)
        (temperature,) = stats.temperature
        assert temperature.count == 3
        assert temperature.grid == 900
        assert temperature.datatime == 1700000000
        assert temperature.values == (220, None, 215)
        assert stats.voltage[0].values == (230000, 231000)
        assert stats.voltage[0].datatime is None
        assert stats.power[0].values == (4500, 0)
        assert stats.energy == ()
        assert stats.humidity == ()


class TestParseColorDefaults:
    """Tests for parse_color_defaults function."""

    def test_parse_color_defaults(self, color_defaults_xml: str) -> None:
        """Test that hue presets and color temperatures are mapped."""
        defaults = xml_mapper.parse_color_defaults(color_defaults_xml)
        (red,) = defaults.hs
        assert red.index == 1
        assert red.name == "Rot"
        assert red.name_enum == 5
        assert [color.index for color in red.colors] == [1, 2, 3]
        assert red.colors[0].hue == Hue(358)
        assert red.colors[0].saturation == Saturation(180)
        assert red.colors[0].value == 230
        assert defaults.temperatures == (
            TemperatureKelvin(2700),
            TemperatureKelvin(3000),
            TemperatureKelvin(6500),
        )


class TestParseSubscriptionState:
    """Tests for parse_subscription_state function."""

    def test_parse_subscription_state(self, subscription_state_xml: str) -> None:
        """Test that the code and the latest AIN are mapped."""
        state = xml_mapper.parse_subscription_state(subscription_state_xml)
        assert state.code is SubscriptionCode.IN_PROGRESS
        assert state.latest_ain == AIN("119340059978-1")

    def test_parse_subscription_state_without_ain(self) -> None:
        """Test that a missing latest AIN is None."""
        state = xml_mapper.parse_subscription_state('<state code="0"><latestain/></state>')
        assert state.code is SubscriptionCode.NO_PROGRESS
        assert state.latest_ain is None

    def test_parse_subscription_state_rejects_unknown_code(self) -> None:
        """Test that unknown subscription codes raise a parse error."""
        with pytest.raises(AhaParseError, match="Unknown SubscriptionCode"):
            xml_mapper.parse_subscription_state('<state code="9"/>')
