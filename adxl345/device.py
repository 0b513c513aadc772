import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import smbus2

from .exceptions import UnexpectedDevice
from . import registers as regs
from .registers import OutputDataRate, Range, Units


@dataclass(frozen=True)
class AccelerationSample:
    x: float
    y: float
    z: float
    units: Units


@dataclass(frozen=True)
class AxisOffsets:
    """Signed 8-bit offset calibration, 15.6 mg per LSB on the device."""
    x: int
    y: int
    z: int


class ADXL345:
    """
    ADXL345 interface class.

    Args:
        bus: smbus2.SMBus from the smbus2 package, or the i2c bus number to
            open one with. A bus passed in is borrowed and left open by
            close(); a bus opened from a number belongs to this object.
        address: i2c address of device on your machine. Found by running
            `i2cdetect -y 1` if on raspberry pi.
            Default: 0x53 (SDO/ALT ADDRESS grounded), 0x1D when pulled high
        odr: Output data rate applied by initialize(). Left untouched when None.
        g_range: Acceleration range applied by initialize(). Left untouched
            when None.

    Raises:
        InvalidConfiguration: odr or g_range is not a defined code.
        TransportError: the bus number could not be opened.

    The driver assumes it is the only user of the device. Callers sharing one
    instance between threads must serialize access themselves.

    Example usage:
        with ADXL345(1) as adxl:
            adxl.initialize()
            sample = adxl.read_acceleration(Units.GRAVITY)
    """

    def __init__(
            self,
            bus: Union[smbus2.SMBus, int],
            address: int = regs.ADDRESS_ALT_GROUNDED,
            odr: Optional[OutputDataRate] = None,
            g_range: Optional[Range] = None
    ):
        self.__log = logging.getLogger(__class__.__name__)
        # Fail before the bus gets opened
        self._odr = None if odr is None else regs.validate_rate(odr)
        self._g_range = None if g_range is None else regs.validate_range(g_range)

        if isinstance(bus, bool):
            raise TypeError(f"Expected an SMBus or a bus number, got {bus!r}")
        if isinstance(bus, int):
            self._bus = smbus2.SMBus(bus)
            self._owns_bus = True
        else:
            self._bus = bus
            self._owns_bus = False
        self._address = address

    @property
    def bus(self):
        return self._bus

    @property
    def address(self) -> int:
        return self._address

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self) -> None:
        """Release the bus if this object opened it."""
        if self._owns_bus and self._bus is not None:
            self._bus.close()
            self._bus = None

    def _read_byte(self, register: int) -> int:
        return self._bus.read_byte_data(self._address, register)

    def _read_block(self, register: int, length: int):
        return self._bus.read_i2c_block_data(self._address, register, length)

    def _write_byte(self, register: int, value: int) -> None:
        self.__log.debug(f"Write 0x{value:02X} to register 0x{register:02X}")
        self._bus.write_byte_data(self._address, register, value)

    def initialize(self) -> int:
        """
        Verify the device identity and switch it into measurement mode.

        Must be called before sampling.

        Returns:
            int: The device ID read back.

        Raises:
            UnexpectedDevice: DEVID does not read 0xE5. Nothing is written
                to the device in that case.
        """
        device_id = self._read_byte(regs.DEVID.address)
        if device_id != regs.DEVICE_ID:
            raise UnexpectedDevice(device_id)

        self.__log.info(
            f"Found ADXL345 device id 0x{device_id:02X} "
            f"at address 0x{self._address:02X}"
        )
        self._write_byte(regs.REG_POWER_CTL, regs.POWER_CTL_MEASURE)

        if self._g_range is not None:
            self.set_measurement_range(self._g_range)
        if self._odr is not None:
            self.set_data_rate(self._odr)
        return device_id

    def read_raw(self) -> Tuple[int, int, int]:
        """Read all three axes in one transaction, as signed LSB counts."""
        data = self._read_block(regs.DATAX0.address, regs.ACCEL_BLOCK_LENGTH)

        # Little-endian pairs: DATAX0, DATAX1, DATAY0, ...
        x = regs.decode_signed16(data[0], data[1])
        y = regs.decode_signed16(data[2], data[3])
        z = regs.decode_signed16(data[4], data[5])
        return (x, y, z)

    def read_acceleration(self, units=Units.GRAVITY) -> AccelerationSample:
        """Read acceleration data from DATAX, DATAY, DATAZ registers.

        Args:
            units: Units.GRAVITY for g, Units.ACCELERATION for m/s².
                True and False are accepted as g and m/s² respectively.

        Returns:
            AccelerationSample
        """
        units = regs.validate_units(units)
        gravity = [regs.scale_to_gravity(raw) for raw in self.read_raw()]
        if units is Units.ACCELERATION:
            values = [regs.scale_to_acceleration(g) for g in gravity]
        else:
            values = gravity
        return AccelerationSample(*values, units=units)

    def set_measurement_range(self, g_range: Range) -> None:
        """
        Select the measurement range, with full resolution enabled.

        DATA_FORMAT also holds SELF_TEST, SPI and INT_INVERT, so it is read
        first and those bits are written back unchanged. The read and the
        write are separate transactions.
        """
        g_range = regs.validate_range(g_range)
        current = self._read_byte(regs.REG_DATA_FORMAT)
        self._write_byte(regs.REG_DATA_FORMAT, regs.encode_range(current, g_range))
        self.__log.debug(f"Measurement range set to {regs.describe_range(g_range)}")

    def get_measurement_range(self) -> Range:
        return regs.decode_range(self._read_byte(regs.REG_DATA_FORMAT))

    def set_data_rate(self, rate: OutputDataRate) -> None:
        # BW_RATE is written whole: LOW_POWER off, reserved bits zero
        value = regs.encode_rate(rate)
        self._write_byte(regs.REG_BW_RATE, value)
        self.__log.debug(f"Data rate set to {regs.describe_rate(value)}")

    def get_data_rate(self) -> OutputDataRate:
        return regs.decode_rate(self._read_byte(regs.REG_BW_RATE))

    def set_offset_x(self, value: int) -> None:
        self._write_byte(regs.REG_OFSX, regs.encode_signed8(value))

    def set_offset_y(self, value: int) -> None:
        self._write_byte(regs.REG_OFSY, regs.encode_signed8(value))

    def set_offset_z(self, value: int) -> None:
        self._write_byte(regs.REG_OFSZ, regs.encode_signed8(value))

    def get_offsets(self) -> AxisOffsets:
        # OFSX, OFSY and OFSZ are contiguous, so one block read covers them
        data = self._read_block(regs.REG_OFSX, regs.OFFSET_BLOCK_LENGTH)
        return AxisOffsets(*(regs.decode_signed8(b) for b in data))
