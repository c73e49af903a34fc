#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

from pomo_engine.config.loader import ConfigLoader
from pomo_engine.config.validation import ConfigValidator


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate pomo.yaml")
    parser.add_argument("--config-dir", type=Path, default=None)
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating {loader.config_file}...")

    if not loader.config_file.exists():
        print("ℹ️  No config file found, defaults will be used")

    try:
        config = loader.merge_config()
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(config)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    durations = config["durations"]
    for name in ("pomodoro", "short_break", "long_break"):
        value = durations.get(name)
        if value is not None and value <= 0:
            print(f"⚠️  durations.{name} is {value}; the default will be used")

    print("✅ Configuration is valid")
    sys.exit(0)


if __name__ == "__main__":
    main()
