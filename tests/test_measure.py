import csv

from adxl345 import ADXL345, Units
import measure


def test_write_to_csv(tmp_path):
    samples = [(0.0, 1.088, 2.176, 3.264), (0.1, -1.0, 0.0, 0.004)]
    filename = tmp_path / "out.csv"

    written = measure.write_to_csv(samples, Units.GRAVITY, str(filename))

    with open(written, newline='') as csvfile:
        rows = list(csv.reader(csvfile))
    assert rows[0] == ['time_s', 'x_g', 'y_g', 'z_g']
    assert rows[1] == ['0.000000', '1.088000', '2.176000', '3.264000']
    assert len(rows) == 3


def test_read_continuous_collects_samples(bus):
    bus.registers[0x32:0x38] = bytes([0x10, 0x01, 0x20, 0x02, 0x30, 0x03])
    adxl = ADXL345(bus)

    samples = measure.read_continuous(adxl, Units.GRAVITY, duration_seconds=0.05, interval=0.01)

    assert samples
    _, x, y, z = samples[0]
    assert (round(x, 3), round(y, 3), round(z, 3)) == (1.088, 2.176, 3.264)
