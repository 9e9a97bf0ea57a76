#!/usr/bin/env python3
"""
Basic GPIO Example for gpioctl
Drives a pin on a mock sysfs tree, then runs the full control sequence
"""
import sys
import os
import tempfile

# Add src directory to path to import gpioctl
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from gpioctl import Config, ControlSequencer, Direction, SysfsPin, SysfsSimulator

def main():
    """Basic GPIO control example"""
    print("gpioctl GPIO Example")
    print("=" * 30)

    pin_number = 17

    with tempfile.TemporaryDirectory(prefix="gpioctl-example-") as base:
        SysfsSimulator(base).provision(pin_number)
        pin = SysfsPin(base, pin_number)

        print(f"\n🔌 Testing GPIO pin {pin_number} under {base}")
        print(f"Export status: {pin.ensure_exported().value}")

        # Drive HIGH then LOW
        pin.set_direction(Direction.OUT)
        for level in (True, False):
            pin.set_value(level)
            print(f"✅ Wrote {int(level)}, read back {int(pin.get_value())}")

        # Same pin through the sequencer, no HTTP report
        print("\nRunning control sequence...")
        config = Config(pin=pin_number, sysfs_base=base, report_enabled=False)
        run = ControlSequencer(config).run()
        print(f"✅ {run}")
        print(run.to_json())

    print("\n✨ Example completed!")
    return run.exit_code

if __name__ == "__main__":
    sys.exit(main())
