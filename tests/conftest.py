"""Pytest configuration and fixtures for FRITZ!Box AHA tests."""

from collections.abc import Callable, Iterator
from unittest.mock import Mock

import httpx
import pytest

from fritzbox_aha.api import AhaSession
from fritzbox_aha.models import SID

TEST_PASSWORD = "topSecret"  # noqa: S105
TEST_USERNAME = "smarthome"
TEST_NOW = 1_700_000_000.5
TEST_SID = "0000000000004711"


def create_session_info(
    sid: str = TEST_SID,
    challenge: str = "deadbeef",
    block_time: int = 0,
    rights: dict[str, int] | None = None,
) -> str:
    """Create a <SessionInfo> document as returned by the login endpoint.

    Args:
        sid: Session identifier to report.
        challenge: Login challenge to report.
        block_time: Seconds until the next login attempt is allowed.
        rights: Granted rights by name; defaults to Dial and HomeAuto.

    Returns:
        The XML document as text.

    """
    if rights is None:
        rights = {"Dial": 2, "HomeAuto": 2}
    rights_xml = "".join(
        f"<Name>{name}</Name><Access>{access}</Access>"
        for name, access in rights.items()
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f"<SessionInfo><SID>{sid}</SID><Challenge>{challenge}</Challenge>"
        f"<BlockTime>{block_time}</BlockTime><Rights>{rights_xml}</Rights>"
        "</SessionInfo>"
    )


@pytest.fixture
def session_info_factory() -> Callable[..., str]:
    """Fixture providing create_session_info for custom login answers."""
    return create_session_info


@pytest.fixture
def challenge_session_info() -> str:
    """Fixture providing the answer to a challenge request."""
    return create_session_info(sid="0000000000000000", rights={})


@pytest.fixture
def logged_in_session_info() -> str:
    """Fixture providing the answer to a successful login."""
    return create_session_info()


@pytest.fixture
def logged_out_session_info() -> str:
    """Fixture providing the answer to a logout request."""
    return create_session_info(sid="0000000000000000", challenge="cafe0815", rights={})


@pytest.fixture
def clock() -> Mock:
    """Fixture providing a clock frozen at TEST_NOW."""
    return Mock(return_value=TEST_NOW)


@pytest.fixture
def aha_session(clock: Mock) -> Iterator[AhaSession]:
    """Fixture providing a session without a SID."""
    with httpx.Client() as client:
        yield AhaSession(
            password=TEST_PASSWORD,
            username=TEST_USERNAME,
            client=client,
            clock=clock,
        )


@pytest.fixture
def logged_in_session(aha_session: AhaSession) -> AhaSession:
    """Fixture providing a session holding a valid SID."""
    aha_session.sid = SID(TEST_SID)
    return aha_session


@pytest.fixture
def device_list_xml() -> str:
    """Fixture providing a <devicelist> document.

    Contains an outlet, a radiator controller, a color bulb unit, a group
    addressed by AIN and a group with its own identifier space.
    """
    return """<devicelist version="1" fwversion="7.57">
<device identifier="08761 0000434" id="17" functionbitmask="35712"
 fwversion="04.16" manufacturer="AVM" productname="FRITZ!DECT 200">
<present>1</present><txbusy>0</txbusy><name>Steckdose</name>
<switch><state>1</state><mode>manuell</mode><lock>0</lock><devicelock>1</devicelock></switch>
<simpleonoff><state>1</state></simpleonoff>
<powermeter><voltage>230051</voltage><power>4500</power><energy>2087</energy></powermeter>
<temperature><celsius>255</celsius><offset>0</offset></temperature>
</device>
<device identifier="09995 0000111" id="16" functionbitmask="320"
 fwversion="05.08" manufacturer="AVM" productname="Comet DECT">
<present>1</present><txbusy>0</txbusy><name>Heizung</name>
<battery>80</battery><batterylow>0</batterylow>
<temperature><celsius>210</celsius><offset>-5</offset></temperature>
<hkr><tist>42</tist><tsoll>253</tsoll><absenk>32</absenk><komfort>42</komfort>
<lock>0</lock><devicelock>0</devicelock><errorcode>0</errorcode>
<windowopenactiv>0</windowopenactiv><windowopenactiveendtime>0</windowopenactiveendtime>
<boostactive>1</boostactive><boostactiveendtime>1700003600</boostactiveendtime>
<batterylow>0</batterylow><battery>80</battery>
<nextchange><endperiod>1700010000</endperiod><tchange>32</tchange></nextchange>
<summeractive>0</summeractive><holidayactive>0</holidayactive>
<adaptiveHeatingActive>1</adaptiveHeatingActive><adaptiveHeatingRunning>0</adaptiveHeatingRunning>
</hkr>
</device>
<device identifier="12701 0054321-1" id="2001" functionbitmask="237572"
 fwversion="0.0" manufacturer="0x0feb" productname="HAN-FUN">
<present>1</present><txbusy>0</txbusy><name>Lampe</name>
<simpleonoff><state>0</state></simpleonoff>
<levelcontrol><level>26</level><levelpercentage>10</levelpercentage></levelcontrol>
<colorcontrol supported_modes="5" current_mode="1" fullcolorsupport="1" mapped="0">
<hue>120</hue><saturation>200</saturation><unmapped_hue></unmapped_hue>
<unmapped_saturation></unmapped_saturation><temperature></temperature>
</colorcontrol>
<etsiunitinfo><etsideviceid>406</etsideviceid><unittype>278</unittype>
<interfaces>512,514,513,9999</interfaces></etsiunitinfo>
</device>
<group identifier="65432 1234567" id="900" functionbitmask="6784"
 fwversion="1.0" manufacturer="AVM" productname="">
<present>1</present><txbusy>0</txbusy><name>Wohnzimmer</name>
<groupinfo><masterdeviceid>17</masterdeviceid><members>17,16</members></groupinfo>
</group>
<group identifier="grp303E4F-3F7D9BE07" id="901" functionbitmask="4160"
 fwversion="1.0" manufacturer="AVM" productname="">
<present>1</present><name>Heizungen</name>
<groupinfo><masterdeviceid>0</masterdeviceid><members>16</members></groupinfo>
</group>
</devicelist>
"""


@pytest.fixture
def template_list_xml() -> str:
    """Fixture providing a <templatelist> document."""
    return """<templatelist version="1">
<template identifier="tmp123456-391234567" id="60000" functionbitmask="320"
 applymask="10" autocreate="0">
<name>Heizen Abwesend</name>
<metadata>{"icon":3}</metadata>
<devices><device identifier="09995 0000111"/></devices>
<applymask><hkr_holidays/><relay_automatic/></applymask>
<sub_templates/>
<triggers/>
</template>
<template identifier="tmp654321-123" id="60001" functionbitmask="0" autocreate="1">
<name>Gehen</name>
<metadata>{"type":"leaving"}</metadata>
<devices/>
<applymask><sub_templates/></applymask>
<sub_templates><template identifier="tmp123456-391234567"/></sub_templates>
<triggers><trigger identifier="tmp111111-222"/></triggers>
</template>
</templatelist>
"""


@pytest.fixture
def trigger_list_xml() -> str:
    """Fixture providing a <triggerlist> document."""
    return """<triggerlist version="1">
<trigger identifier="tmp111111-222" active="1"><name>Morgens</name></trigger>
<trigger identifier="tmp111111-333" active="0"><name>Abends</name></trigger>
</triggerlist>
"""


@pytest.fixture
def device_stats_xml() -> str:
    """Fixture providing a <devicestats> document."""
    return """<devicestats>
<temperature><stats count="3" grid="900" datatime="1700000000">220,-,215</stats></temperature>
<voltage><stats count="2" grid="60">230000,231000</stats></voltage>
<power><stats count="2" grid="10">4500,0</stats></power>
</devicestats>
"""


@pytest.fixture
def color_defaults_xml() -> str:
    """Fixture providing a <colordefaults> document."""
    return """<colordefaults>
<hsdefaults>
<hs hue_index="1"><name enum="5">Rot</name>
<color sat_index="1" hue="358" sat="180" val="230"/>
<color sat_index="2" hue="358" sat="112" val="237"/>
<color sat_index="3" hue="358" sat="54" val="245"/>
</hs>
</hsdefaults>
<temperaturedefaults><temp value="2700"/><temp value="3000"/><temp value="6500"/></temperaturedefaults>
</colordefaults>
"""


@pytest.fixture
def subscription_state_xml() -> str:
    """Fixture providing the <state> document of a ULE subscription."""
    return '<state code="1"><latestain>11934 0059978-1</latestain></state>'
