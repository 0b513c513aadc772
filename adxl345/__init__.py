from .device import ADXL345, AccelerationSample, AxisOffsets
from .exceptions import (
    ADXL345Error,
    InvalidConfiguration,
    TransportError,
    UnexpectedDevice,
)
from .registers import (
    ADDRESS_ALT_GROUNDED,
    ADDRESS_ALT_HIGH,
    DEVICE_ID,
    OutputDataRate,
    Range,
    Units,
    describe_range,
    describe_rate,
)
