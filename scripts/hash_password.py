#!/usr/bin/env python3
"""
Print an argon2 hash suitable for the AUTH_PASSWORD setting.

Usage:
  python scripts/hash_password.py            # prompts for the password
  python scripts/hash_password.py --password s3cret
"""
from __future__ import annotations

import argparse
import getpass

from notecalc.core.security import hash_password


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Hash a login password with argon2")
    ap.add_argument("--password", help="Password to hash (prompted when omitted)")
    args = ap.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must not be empty")
    print(hash_password(password))


if __name__ == "__main__":
    main()
