"""Constants for the FRITZ!Box AHA client.

This module contains the endpoints, command names, protocol sentinels,
configuration keys and the code tables used when mapping responses.
"""

from enum import Enum, IntEnum

DEFAULT_HOSTNAME = "fritz.box"
DEFAULT_PORT = 443
DEFAULT_TIMEOUT = 10.0

LOGIN_PATH = "/login_sid.lua"
HOMEAUTOSWITCH_PATH = "/webservices/homeautoswitch.lua"
LOGIN_VERSION = "2"

CONF_HOSTNAME = "hostname"
CONF_PORT = "port"
CONF_USERNAME = "username"
CONF_PASSWORD = "password"  # noqa: S105
CONF_VERIFY_SSL = "verify_ssl"
CONF_TIMEOUT = "timeout"

INVALID_SID = "0000000000000000"
INVAL = "inval"
PBKDF2_CHALLENGE_PREFIX = "2$"

HKR_OFF = 253
HKR_ON = 254
HKR_OFF_DECI_CELSIUS = 0
HKR_ON_DECI_CELSIUS = 300
HKR_MIN_DECI_CELSIUS = 80
HKR_MAX_DECI_CELSIUS = 280

MIN_DECI_CELSIUS = -2732
END_TIMESTAMP_WINDOW = 86400
MAX_NAME_LENGTH = 40

# switchcmd values of the command endpoint
CMD_GET_SWITCH_LIST = "getswitchlist"
CMD_SET_SWITCH_ON = "setswitchon"
CMD_SET_SWITCH_OFF = "setswitchoff"
CMD_SET_SWITCH_TOGGLE = "setswitchtoggle"
CMD_GET_SWITCH_STATE = "getswitchstate"
CMD_GET_SWITCH_PRESENT = "getswitchpresent"
CMD_GET_SWITCH_POWER = "getswitchpower"
CMD_GET_SWITCH_ENERGY = "getswitchenergy"
CMD_GET_SWITCH_NAME = "getswitchname"
CMD_GET_DEVICE_LIST_INFOS = "getdevicelistinfos"
CMD_GET_TEMPERATURE = "gettemperature"
CMD_GET_HKRT_SOLL = "gethkrtsoll"
CMD_GET_HKR_KOMFORT = "gethkrkomfort"
CMD_GET_HKR_ABSENK = "gethkrabsenk"
CMD_SET_HKRT_SOLL = "sethkrtsoll"
CMD_GET_BASIC_DEVICE_STATS = "getbasicdevicestats"
CMD_GET_TEMPLATE_LIST_INFOS = "gettemplatelistinfos"
CMD_GET_TRIGGER_LIST_INFOS = "gettriggerlistinfos"
CMD_APPLY_TEMPLATE = "applytemplate"
CMD_SET_SIMPLE_ON_OFF = "setsimpleonoff"
CMD_SET_LEVEL = "setlevel"
CMD_SET_LEVEL_PERCENTAGE = "setlevelpercentage"
CMD_SET_COLOR = "setcolor"
CMD_SET_COLOR_TEMPERATURE = "setcolortemperature"
CMD_GET_COLOR_DEFAULTS = "getcolordefaults"
CMD_SET_HKR_BOOST = "sethkrboost"
CMD_SET_HKR_WINDOW_OPEN = "sethkrwindowopen"
CMD_SET_BLIND = "setblind"
CMD_SET_NAME = "setname"
CMD_START_ULE_SUBSCRIPTION = "startulesubscription"
CMD_GET_SUBSCRIPTION_STATE = "getsubscriptionstate"


class HandleBlind(Enum):
    """Targets of the setblind command, sent as lower-case names."""

    CLOSE = 0
    OPEN = 1
    STOP = 2

    @property
    def param(self) -> str:
        """Return the wire value of the target."""
        return self.name.lower()


class SimpleOnOffTarget(IntEnum):
    """Targets of the setsimpleonoff command, sent as ordinals."""

    OFF = 0
    ON = 1
    TOGGLE = 2


class Functions(IntEnum):
    """Bits of the functionbitmask attribute."""

    HANFUN_DEVICE = 0
    RESERVED1 = 1
    BULB = 2
    RESERVED2 = 3
    ALARM_SENSOR = 4
    AVM_BUTTON = 5
    AVM_RADIATOR_CONTROLLER = 6
    AVM_ENERGY_GAUGE = 7
    TEMPERATURE_SENSOR = 8
    AVM_SWITCHSOCKET = 9
    AVM_DECT_REPEATER = 10
    AVM_MICROFONE = 11
    RESERVED3 = 12
    HANFUN_UNIT = 13
    RESERVED4 = 14
    DEVICE_ONOFF = 15
    DEVICE_WITH_LEVEL = 16
    BULB_WITH_COLOR = 17
    BLIND = 18
    RESERVED5 = 19
    HUMIDITY_SENSOR = 20

    @classmethod
    def from_bitmask(cls, bitmask: int) -> frozenset["Functions"]:
        """Return the functions whose bit is set in the bitmask."""
        return frozenset(function for function in cls if bitmask & (1 << function))


class ApplyMask(IntEnum):
    """Bits of a template applymask."""

    HKR_SUMMER = 0
    HKR_TEMPERATURE = 1
    HKR_HOLIDAYS = 2
    HKR_TIME_TABLE = 3
    RELAY_MANUAL = 4
    RELAY_AUTOMATIC = 5
    LEVEL = 6
    COLOR = 7
    DIALHELPER = 8
    SUN_SIMULATION = 9
    SUB_TEMPLATES = 10
    MAIN_WIFI = 11
    GUEST_WIFI = 12
    TAM_CONTROL = 13
    HTTP_REQUEST = 14
    TIMER_CONTROL = 15
    SWITCH_MASTER = 16
    CUSTOM_NOTIFICATION = 17
    TRIGGERS = 18

    @classmethod
    def from_bitmask(cls, bitmask: int) -> frozenset["ApplyMask"]:
        """Return the apply mask entries whose bit is set in the bitmask."""
        return frozenset(entry for entry in cls if bitmask & (1 << entry))


# child element names of <applymask> in template listings
APPLY_MASK_ELEMENT_MAP = {
    "hkr_summer": ApplyMask.HKR_SUMMER,
    "hkr_temperature": ApplyMask.HKR_TEMPERATURE,
    "hkr_holidays": ApplyMask.HKR_HOLIDAYS,
    "hkr_time_table": ApplyMask.HKR_TIME_TABLE,
    "relay_manual": ApplyMask.RELAY_MANUAL,
    "relay_automatic": ApplyMask.RELAY_AUTOMATIC,
    "level": ApplyMask.LEVEL,
    "color": ApplyMask.COLOR,
    "dialhelper": ApplyMask.DIALHELPER,
    "sun_simulation": ApplyMask.SUN_SIMULATION,
    "sub_templates": ApplyMask.SUB_TEMPLATES,
    "main_wifi": ApplyMask.MAIN_WIFI,
    "guest_wifi": ApplyMask.GUEST_WIFI,
    "tam_control": ApplyMask.TAM_CONTROL,
    "http_request": ApplyMask.HTTP_REQUEST,
    "timer_control": ApplyMask.TIMER_CONTROL,
    "switch_master": ApplyMask.SWITCH_MASTER,
    "custom_notification": ApplyMask.CUSTOM_NOTIFICATION,
    "triggers": ApplyMask.TRIGGERS,
}


class ColorModes(IntEnum):
    """Bits of the supported_modes/current_mode color control attributes."""

    HUE_SATURATION = 1
    COLOR_TEMPERATURE = 4

    @classmethod
    def from_bitmask(cls, bitmask: int) -> frozenset["ColorModes"]:
        """Return the color modes contained in the bitmask."""
        return frozenset(mode for mode in cls if bitmask & mode)


class HkrErrorCodes(IntEnum):
    """Error codes reported by radiator controllers."""

    NO_ERROR = 0
    NO_ADAPTION = 1
    VALVE_LIFT = 2
    NO_VALVE_MOVEMENT = 3
    PREPARING = 4
    INSTALL_MODE = 5
    ADAPTING = 6


class HANFUNUnits(IntEnum):
    """HAN-FUN unit types."""

    SIMPLE_ON_OFF_SWITCHABLE = 256
    SIMPLE_ON_OFF_SWITCH = 257
    AC_OUTLET = 262
    AC_OUTLET_SIMPLE_POWER_METERING = 263
    SIMPLE_LIGHT = 264
    DIMMABLE_LIGHT = 265
    DIMMER_SWITCH = 266
    SIMPLE_BUTTON = 273
    COLOR_BULB = 277
    DIMMABLE_COLOR_BULB = 278
    BLIND = 281
    LAMELLAR = 282
    SIMPLE_DETECTOR = 512
    DOOR_OPEN_CLOSE_DETECTOR = 513
    WINDOW_OPEN_CLOSE_DETECTOR = 514
    MOTION_DETECTOR = 515
    FLOOD_DETECTOR = 518
    GLAS_BREAK_DETECTOR = 519
    VIBRATION_DETECTOR = 520
    SIREN = 640


class HANFUNInterfaces(IntEnum):
    """HAN-FUN interfaces."""

    ALERT = 256
    KEEP_ALIVE = 277
    ON_OFF = 512
    LEVEL_CTRL = 513
    COLOR_CTRL = 514
    OPEN_CLOSE = 516
    OPEN_CLOSE_CONFIG = 517
    SIMPLE_BUTTON = 772
    SUOTA_UPDATE = 1024


class AlertState(IntEnum):
    """States of an alert sensor."""

    NO_ERROR = 0
    BARRIER = 1
    OVERHEAT = 2


class ScenarioType(IntEnum):
    """Scenario types of template metadata."""

    UNDEFINED = 0
    COMING = 1
    LEAVING = 2
    GENERIC = 3


class SubscriptionCode(IntEnum):
    """Result codes of a ULE device subscription."""

    NO_PROGRESS = 0
    IN_PROGRESS = 1
    TIMEOUT = 2
    OTHER_ERROR = 3
