# Local module defined exceptions
class ADXL345Error(Exception):
    """Base class for errors raised by the ADXL345 driver."""

    pass


class UnexpectedDevice(ADXL345Error):
    """Raised when the DEVID register does not hold the ADXL345 identity."""

    def __init__(self, device_id):
        self.device_id = device_id
        super().__init__(f"Unexpected ADXL345 device ID: 0x{device_id:02X}")


class InvalidConfiguration(ADXL345Error, ValueError):
    """Raised when a range, data rate or unit is outside its enumeration."""

    def __init__(self, value, what="configuration value"):
        self.value = value
        super().__init__(f"Invalid {what}: {value!r}")


# smbus2 reports bus failures as OSError; they propagate untouched.
TransportError = OSError
