#!/usr/bin/env python3
"""Smoke-test script: connect to an Easy Smart switch and print get_interfaces().

Environment variables
---------------------
EASYSMART_HOST        Switch IP, hostname or base URL (e.g. 192.168.0.1)
EASYSMART_USERNAME    Login username          (required)
EASYSMART_PASSWORD    Login password          (required)
EASYSMART_VERIFY_TLS  Set to "true" to verify TLS (default: false)
"""

from __future__ import annotations

import json
import os
import sys

from napalm_easysmart.driver import EasySmartDriver


def _require(name: str) -> str:
    print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
    sys.exit(1)


def main() -> None:
    host = os.environ.get("EASYSMART_HOST", "")
    if not host:
        print("ERROR: EASYSMART_HOST is not set.", file=sys.stderr)
        sys.exit(1)

    username = os.environ.get("EASYSMART_USERNAME") or _require("EASYSMART_USERNAME")
    password = os.environ.get("EASYSMART_PASSWORD") or _require("EASYSMART_PASSWORD")
    verify_tls = os.environ.get("EASYSMART_VERIFY_TLS", "false").lower() == "true"

    driver = EasySmartDriver(
        hostname=host,
        username=username,
        password=password,
        optional_args={"verify_tls": verify_tls},
    )
    try:
        driver.open()
        interfaces = driver.get_interfaces()
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(interfaces, indent=2))


if __name__ == "__main__":
    main()
