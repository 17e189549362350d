#!/usr/bin/env python3
"""Smoke-test script: retrieve device facts from a TP-Link Easy Smart switch.

Usage::

    export EASYSMART_HOST="192.168.0.1"
    export EASYSMART_USERNAME="admin"
    export EASYSMART_PASSWORD="your-password"
    export EASYSMART_SESSION_FILE="~/.easysmart-session.json"   # optional
    python examples/get_facts.py

With a session file, a second run within the cookie lifetime reuses the
stored ``SessionID`` instead of logging in again.

Exit codes:
    0: facts retrieved and printed successfully.
    1: missing environment variable or driver error.
"""

from __future__ import annotations

import json
import os
import sys


def _env(name: str, default: str | None = None) -> str:
    value = os.environ.get(name, default)
    if value is None:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def main() -> None:
    host = _env("EASYSMART_HOST")
    username = _env("EASYSMART_USERNAME")
    password = _env("EASYSMART_PASSWORD")
    optional_args: dict[str, object] = {}
    session_file = os.environ.get("EASYSMART_SESSION_FILE")
    if session_file:
        optional_args["session_file"] = os.path.expanduser(session_file)

    # Import here so import errors surface after env var check.
    from napalm_easysmart.driver import EasySmartDriver

    driver = EasySmartDriver(
        hostname=host,
        username=username,
        password=password,
        optional_args=optional_args,
    )

    try:
        driver.open()
        facts = driver.get_facts()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(facts, indent=2))


if __name__ == "__main__":
    main()
