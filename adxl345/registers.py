"""
Register map and codecs for the ADXL345.

Everything in this module is pure: it knows register addresses, bit-field
layouts and numeric conversions, but never touches the bus.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping

from .exceptions import InvalidConfiguration

# I2C addresses, selected by the SDO/ALT ADDRESS pin
ADDRESS_ALT_GROUNDED = 0x53  # Default
ADDRESS_ALT_HIGH = 0x1D

DEVICE_ID = 0xE5

# Register addresses
# WARNING: Registers 0x01 through 0x1C are reserved. Do not touch!
REG_DEVID = 0x00
REG_OFSX = 0x1E
REG_OFSY = 0x1F
REG_OFSZ = 0x20
REG_BW_RATE = 0x2C
REG_POWER_CTL = 0x2D
REG_DATA_FORMAT = 0x31
REG_DATAX0 = 0x32  # DATAX0 through DATAZ1 are contiguous

ACCEL_BLOCK_LENGTH = 6
OFFSET_BLOCK_LENGTH = 3

MG2G_SCALE_FACTOR = 0.004  # 4 mg per LSB
EARTH_GRAVITY_MS2 = 9.80665

UNKNOWN = "unknown"


class OutputDataRate(IntEnum):
    """
    Enumerated class for allowable Output Data Rates (ODR) in Hz.
    12P5 means 12.5 Hz
    """
    ODR_3200 = 0b1111
    ODR_1600 = 0b1110
    ODR_800  = 0b1101
    ODR_400  = 0b1100
    ODR_200  = 0b1011
    ODR_100  = 0b1010 # Default
    ODR_50   = 0b1001
    ODR_25   = 0b1000
    ODR_12P5 = 0b0111
    ODR_6P25 = 0b0110
    ODR_3P13 = 0b0101
    ODR_1P56 = 0b0100
    ODR_0P78 = 0b0011
    ODR_0P39 = 0b0010
    ODR_0P20 = 0b0001
    ODR_0P10 = 0b0000

    @property
    def hz(self) -> float:
        # Get value in Hz from enum member's names
        return float(self.name[4:].replace("P", "."))


class Range(IntEnum):
    """
    Enumerated class for allowable acceleration range.
    Full resolution is always enabled alongside the range.
    """
    RANGE_16G = 0b11
    RANGE_8G  = 0b10
    RANGE_4G  = 0b01
    RANGE_2G  = 0b00 # Default

    @property
    def g(self) -> int:
        # Get value in g's from enum member's names
        return int(self.name[6:-1])


class Units(Enum):
    GRAVITY = "g"
    ACCELERATION = "m/s²"


@dataclass(frozen=True)
class Register:
    """
    Register descriptor

    Parameters
    ----------
    address: int
        Memory-mapped address of register (as per manual)
    read_only: bool
        Whether register can be written to
    fields: Mapping[str, int]
        Mapping between name of field and a bit mask that selects it.
        For example if the 6 right-most bits of a certain register delineates a
        field named "FIELD", it is selected by 0b0011_1111 or 0x3F
    """
    address: int
    read_only: bool
    fields: Mapping[str, int]

    def get(self, reg_value: int, field: str) -> int:
        mask = self.fields[field]
        return (reg_value & mask) >> _shift(mask)

    def set(self, reg_value: int, field: str, value: int) -> int:
        """Return reg_value with only the selected field replaced."""
        if self.read_only:
            raise RuntimeError("Cannot write to read-only register")
        mask = self.fields[field]
        return ((reg_value & ~mask) | ((value << _shift(mask)) & mask)) & 0xFF


def _shift(mask: int) -> int:
    return (mask & -mask).bit_length() - 1


DEVID = Register(REG_DEVID, True, MappingProxyType({
    "DEVID"      : 0xFF
}))

# First of the six DATAX0..DATAZ1 output registers
DATAX0 = Register(REG_DATAX0, True, MappingProxyType({
    "DATA"       : 0xFF
}))

BW_RATE = Register(REG_BW_RATE, False, MappingProxyType({
    "LOW_POWER"  : 0x10,
    "RATE"       : 0x0F
}))

POWER_CTL = Register(REG_POWER_CTL, False, MappingProxyType({
    "LINK"       : 0x20,
    "AUTO_SLEEP" : 0x10,
    "MEASURE"    : 0x08, # 0 places into standby mode, 1 into measurement mode
    "SLEEP"      : 0x04,
    "WAKEUP"     : 0x03
}))

# Measurement on, AUTO_SLEEP off (0x08)
POWER_CTL_MEASURE = POWER_CTL.set(0, "MEASURE", 1)

DATA_FORMAT = Register(REG_DATA_FORMAT, False, MappingProxyType({
    "SELF_TEST"  : 0x80,
    "SPI"        : 0x40,
    "INT_INVERT" : 0x20,
    "FULL_RES"   : 0x08,
    "JUSTIFY"    : 0x04,
    "RANGE"      : 0x03
}))

# Range and full resolution are owned by this driver, the rest is preserved
_DATA_FORMAT_OWNED = 0x0F


def _validate(enum_cls, value, what):
    # bool is an int subclass; True must not sneak in as code 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(value, what)
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidConfiguration(value, what) from None


def validate_range(value) -> Range:
    return _validate(Range, value, "measurement range")


def validate_rate(value) -> OutputDataRate:
    return _validate(OutputDataRate, value, "data rate")


def validate_units(value) -> Units:
    """Accept a Units member, its string value, or a bool (True means g)."""
    if isinstance(value, bool):
        return Units.GRAVITY if value else Units.ACCELERATION
    try:
        return Units(value)
    except ValueError:
        raise InvalidConfiguration(value, "unit") from None


def decode_signed16(low_byte: int, high_byte: int) -> int:
    value = (high_byte << 8) | low_byte
    if value & 0x8000:
        return value - 65536
    return value


def decode_signed8(value: int) -> int:
    if value & 0x80:
        return value - 256
    return value


def encode_signed8(value: int) -> int:
    return value & 0xFF


def scale_to_gravity(raw: int) -> float:
    return raw * MG2G_SCALE_FACTOR


def scale_to_acceleration(gravity: float) -> float:
    return gravity * EARTH_GRAVITY_MS2


def encode_range(current_format_byte: int, g_range) -> int:
    """
    Build a DATA_FORMAT value selecting g_range with full resolution on.

    The upper four bits of current_format_byte are carried over unchanged.
    """
    g_range = validate_range(g_range)
    value = current_format_byte & ~_DATA_FORMAT_OWNED & 0xFF
    value = DATA_FORMAT.set(value, "RANGE", g_range)
    return DATA_FORMAT.set(value, "FULL_RES", 1)


def encode_rate(rate) -> int:
    # Only RATE is set, so LOW_POWER and the reserved bits are written as zero
    return BW_RATE.set(0, "RATE", validate_rate(rate))


def decode_range(format_byte: int) -> Range:
    return Range(DATA_FORMAT.get(format_byte, "RANGE"))


def decode_rate(rate_byte: int) -> OutputDataRate:
    return OutputDataRate(BW_RATE.get(rate_byte, "RATE"))


def describe_range(value) -> str:
    try:
        return f"±{validate_range(value).g}g"
    except InvalidConfiguration:
        return UNKNOWN


def describe_rate(value) -> str:
    try:
        return f"{validate_rate(value).hz:g} Hz"
    except InvalidConfiguration:
        return UNKNOWN
