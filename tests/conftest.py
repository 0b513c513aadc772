import os
import sys

import pytest

# Add module directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


class FakeSMBus:
    """! Stands in for smbus2.SMBus, backed by a 256-byte register file.

    Every transaction is appended to `calls` as (method, register, ...) so
    tests can check ordering and that nothing reached the bus."""

    def __init__(self, address=0x53):
        self.address = address
        self.registers = bytearray(256)
        self.calls = []
        self.fail_on = set()
        self.closed = False

    def _check(self, method, i2c_addr):
        assert i2c_addr == self.address
        if method in self.fail_on:
            raise OSError(121, "Remote I/O error")

    def read_byte_data(self, i2c_addr, register):
        self.calls.append(("read_byte_data", register))
        self._check("read_byte_data", i2c_addr)
        return self.registers[register]

    def write_byte_data(self, i2c_addr, register, value):
        self.calls.append(("write_byte_data", register, value))
        self._check("write_byte_data", i2c_addr)
        assert 0 <= value <= 0xFF
        self.registers[register] = value

    def read_i2c_block_data(self, i2c_addr, register, length):
        self.calls.append(("read_i2c_block_data", register, length))
        self._check("read_i2c_block_data", i2c_addr)
        return list(self.registers[register:register + length])

    def writes(self):
        return [call for call in self.calls if call[0] == "write_byte_data"]

    def close(self):
        self.closed = True


@pytest.fixture
def bus():
    fake = FakeSMBus()
    fake.registers[0x00] = 0xE5
    return fake
