#!/usr/bin/env python3
"""Example: toggle a port's admin state and revert it (safe, dry-run by default).

Usage::

    # Dry-run (no changes), shows the planned toggle:
    export EASYSMART_HOST=192.168.0.1
    export TEST_PORT_ID=1        # required: 1-based port number to test
    python examples/toggle_port_admin.py

    # Apply (disables port, waits 2 s, re-enables it):
    export APPLY=1
    python examples/toggle_port_admin.py

Environment variables:
    EASYSMART_HOST        Switch IP or hostname (required).
    EASYSMART_USERNAME    Login username (default: admin).
    EASYSMART_PASSWORD    Login password (default: admin).
    EASYSMART_LOGIN_TIMEOUT, EASYSMART_VERIFY_TLS, ...
                          Any ``SwitchSettings`` field (optional).
    TEST_PORT_ID          1-based port number to toggle (required).
    APPLY                 Set to "1" to actually apply changes (default: dry-run).

WARNING: Do NOT set TEST_PORT_ID to the management uplink port.
"""

from __future__ import annotations

import os
import sys
import time

from napalm_easysmart.client.session import EasySmartCredentials
from napalm_easysmart.config import SwitchSettings
from napalm_easysmart.events import LoggingEventRecorder
from napalm_easysmart.manager import SessionManager
from napalm_easysmart.storage import MemorySessionStore


def main() -> None:
    host = os.environ.get("EASYSMART_HOST", "")
    if not host:
        print("ERROR: EASYSMART_HOST environment variable is required.", file=sys.stderr)
        sys.exit(1)

    port_id_str = os.environ.get("TEST_PORT_ID", "")
    if not port_id_str:
        print("ERROR: TEST_PORT_ID environment variable is required.", file=sys.stderr)
        print("  Set it to the 1-based port number you want to toggle.", file=sys.stderr)
        sys.exit(1)

    try:
        port_id = int(port_id_str)
    except ValueError:
        print(f"ERROR: TEST_PORT_ID must be an integer, got {port_id_str!r}", file=sys.stderr)
        sys.exit(1)

    creds = EasySmartCredentials(
        host=host,
        username=os.environ.get("EASYSMART_USERNAME", "admin"),
        password=os.environ.get("EASYSMART_PASSWORD", "admin"),
    )
    apply_changes = os.environ.get("APPLY", "0") == "1"

    manager = SessionManager(
        store=MemorySessionStore(),
        recorder=LoggingEventRecorder(),
        settings=SwitchSettings.from_env(),
    )
    manager.ensure_ready(creds)

    try:
        current = {p.port_number: p for p in manager.get_ports()}.get(port_id)
        if current is None:
            print(f"ERROR: Port {port_id} not found on switch.", file=sys.stderr)
            sys.exit(1)

        print(f"Current state of Port {port_id}:")
        print(f"  status       = {current.status_label}")
        print(f"  speed        = {current.speed_configured.label}")
        print(f"  flow_control = {current.flow_control_configured_label}")
        print()

        original = bool(current.enabled)
        toggled = not original
        print(f"Planned toggle: Port {port_id} -> {'Enable' if toggled else 'Disable'}")
        print()

        if not apply_changes:
            print("Dry-run mode: set APPLY=1 to apply changes.")
            return

        result = manager.set_port_config(
            port_id, toggled, current.speed_configured, bool(current.flow_control_configured)
        )
        print(f"[APPLY] {result.message}")
        if not result.success:
            sys.exit(1)
        print("  Waiting 2 seconds...")
        time.sleep(2)

        result = manager.set_port_config(
            port_id, original, current.speed_configured, bool(current.flow_control_configured)
        )
        print(f"[APPLY] {result.message}")
        if not result.success:
            sys.exit(1)
        print("  Port restored to original state.")

    finally:
        manager.close()


if __name__ == "__main__":
    main()
