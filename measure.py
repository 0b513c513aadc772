#!/usr/bin/env python3
import argparse
import csv
import logging
import time
from datetime import datetime

import smbus2

from adxl345 import (
    ADXL345,
    ADDRESS_ALT_GROUNDED,
    OutputDataRate,
    Range,
    Units,
    describe_range,
    describe_rate,
)


def init_adxl(adxl, g_range, odr):
    """Initialize ADXL345 for continuous measurement."""
    print("\n=== ADXL345 INITIALIZATION ===")

    device_id = adxl.initialize()
    print(f"Device ID: 0x{device_id:02X}")

    adxl.set_measurement_range(g_range)
    adxl.set_data_rate(odr)

    # Verify settings
    print("\n*** REGISTER VERIFICATION ***")
    print(f"Measurement range: {describe_range(adxl.get_measurement_range())}")
    print(f"Data rate:         {describe_rate(adxl.get_data_rate())}")
    offsets = adxl.get_offsets()
    print(f"Offsets:           x={offsets.x} y={offsets.y} z={offsets.z}")

    print("\nInitialization complete.\n")


def read_continuous(adxl, units, duration_seconds=10, interval=0.1):
    """Poll the data registers at a fixed interval.

    Args:
        adxl: ADXL345 instance
        units: Units for the returned samples
        duration_seconds: How long to acquire data
        interval: Seconds between reads

    Returns:
        list: List of (timestamp, x, y, z) tuples
    """
    print(f"=== STARTING ACQUISITION ===")
    print(f"Duration: {duration_seconds}s, interval: {interval}s\n")

    samples = []
    errors = 0
    start_time = time.time()
    while time.time() - start_time < duration_seconds:
        try:
            sample = adxl.read_acceleration(units)
        except OSError as e:
            errors += 1
            print(f"ADXL345 read error: {e}")
            time.sleep(interval * 2)
            continue

        timestamp = time.time() - start_time
        samples.append((timestamp, sample.x, sample.y, sample.z))
        print(f"t={timestamp:8.3f}s  x={sample.x:+8.4f}  y={sample.y:+8.4f}  "
              f"z={sample.z:+8.4f}  {sample.units.value}")
        time.sleep(interval)

    print(f"\n=== ACQUISITION COMPLETE ===")
    print(f"Collected {len(samples)} samples, {errors} read errors\n")
    return samples


def write_to_csv(samples, units, filename=None):
    """Write samples with timestamps to CSV file.

    Args:
        samples: List of (timestamp, x, y, z) tuples
        units: Units the samples are expressed in
        filename: Output filename (auto-generated if None)

    Returns:
        str: The filename written to
    """
    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"accelerometer_data_{timestamp}.csv"

    suffix = "g" if units is Units.GRAVITY else "ms2"
    print(f"Writing {len(samples)} samples to {filename}...")

    with open(filename, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['time_s', f'x_{suffix}', f'y_{suffix}', f'z_{suffix}'])
        for timestamp, x, y, z in samples:
            writer.writerow([
                f"{timestamp:.6f}",
                f"{x:.6f}",
                f"{y:.6f}",
                f"{z:.6f}"
            ])

    return filename


def parse_args():
    parser = argparse.ArgumentParser(description="Sample an ADXL345 accelerometer")
    parser.add_argument("--bus", type=int, default=1, help="i2c bus number")
    parser.add_argument("--address", type=lambda s: int(s, 0),
                        default=ADDRESS_ALT_GROUNDED, help="i2c address (0x53 or 0x1D)")
    parser.add_argument("--range", dest="g_range", choices=[r.name for r in Range],
                        default=Range.RANGE_2G.name)
    parser.add_argument("--rate", dest="odr", choices=[r.name for r in OutputDataRate],
                        default=OutputDataRate.ODR_100.name)
    parser.add_argument("--units", choices=[u.name for u in Units],
                        default=Units.GRAVITY.name)
    parser.add_argument("--duration", type=float, default=10.0, help="seconds")
    parser.add_argument("--interval", type=float, default=0.1, help="seconds between reads")
    parser.add_argument("--csv", action="store_true", help="write samples to a CSV file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main():
    """Main measurement routine."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s - %(message)s",
    )
    units = Units[args.units]

    with smbus2.SMBus(args.bus) as bus:
        adxl = ADXL345(bus, address=args.address)
        init_adxl(adxl, Range[args.g_range], OutputDataRate[args.odr])

        samples = read_continuous(adxl, units, args.duration, args.interval)

    if args.csv:
        filename = write_to_csv(samples, units)
        print(f"Data saved to: {filename}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nMeasurement interrupted by user.")
