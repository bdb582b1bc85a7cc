#!/usr/bin/env python3
"""
Add a calculator directly to the configured data directory.

Usage:
  python scripts/add_calculator.py --oid 7 --manufacturer Acme --grade 8 --battery-type 2 [--data-dir ./data]
"""
from __future__ import annotations

import argparse
import sys

from notecalc.core.config import get_settings
from notecalc.domain.validation import ValidationFailure, validate_calculator
from notecalc.repositories.calculators_repository import CalculatorManager


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Add a calculator to calculators.json")
    ap.add_argument("--oid", required=True, help="Unique integer id")
    ap.add_argument("--manufacturer", required=True)
    ap.add_argument("--grade", required=True, help="Integer 0-10")
    ap.add_argument("--battery-type", required=True, help="1, 2 or 3")
    ap.add_argument("--data-dir", help="Storage directory (default: DATA_DIR setting)")
    args = ap.parse_args(argv)

    settings = get_settings()
    calculator = validate_calculator(args.oid, args.manufacturer, args.grade, args.battery_type)
    if isinstance(calculator, ValidationFailure):
        raise SystemExit(calculator.error)

    manager = CalculatorManager(args.data_dir or settings.data_dir, settings.calculators_file)
    if manager.add(calculator) is None:
        raise SystemExit(f"A calculator with oid {calculator.oid} already exists")
    print("OK: calculator added")
    print(f"  Oid: {calculator.oid}")
    print(f"  Manufacturer: {calculator.manufacturer}")
    print(f"  File: {manager.path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
