#!/usr/bin/env python3
"""Example: apply an incremental port-based VLAN change to an Easy Smart switch.

Only the VLANs listed in ``DESIRED_VLANS`` are affected; all other VLANs on
the switch are left untouched.  A list of ports means "present with exactly
these members", ``None`` means "absent" (VLAN 1 is never deleted).

Usage (dry run, default):

    EASYSMART_HOST=192.168.0.1 python examples/apply_vlan.py

Usage (live apply):

    APPLY=1 EASYSMART_HOST=192.168.0.1 python examples/apply_vlan.py

Environment variables:
    EASYSMART_HOST        Switch IP or hostname (required).
    EASYSMART_USERNAME    Login username (default: admin).
    EASYSMART_PASSWORD    Login password (default: admin).
    EASYSMART_VERIFY_TLS  Set to "true" to verify TLS certificates (default: false).
    APPLY                 Set to "1" to actually apply changes (default: dry-run).
"""

from __future__ import annotations

import os
import sys

from napalm_easysmart.driver import EasySmartDriver

# ---------------------------------------------------------------------------
# Incremental VLAN change set: only these VLANs will be touched.
# ---------------------------------------------------------------------------
DESIRED_VLANS: dict[int, list[int] | None] = {
    222: [1, 2, 3],  # create / update
    # 10: None,  # uncomment to delete VLAN 10
}

# ---------------------------------------------------------------------------
# Read configuration from environment
# ---------------------------------------------------------------------------
host = os.environ.get("EASYSMART_HOST", "")
if not host:
    print("ERROR: EASYSMART_HOST environment variable is required.", file=sys.stderr)
    sys.exit(1)

username = os.environ.get("EASYSMART_USERNAME", "admin")
password = os.environ.get("EASYSMART_PASSWORD", "admin")
verify_tls = os.environ.get("EASYSMART_VERIFY_TLS", "false").lower() == "true"
apply_changes = os.environ.get("APPLY", "0") == "1"

# ---------------------------------------------------------------------------
# Driver setup and apply
# ---------------------------------------------------------------------------
print(f"Target switch : {host}")
print(f"Apply changes : {apply_changes}")
print()

driver = EasySmartDriver(
    hostname=host,
    username=username,
    password=password,
    optional_args={"verify_tls": verify_tls, "log_events": True},
)

try:
    driver.open()
    current = {
        vid: [int(name.split()[-1]) for name in vlan["interfaces"]]
        for vid, vlan in driver.get_vlans().items()
    }

    upsert = {
        vid: sorted(ports)
        for vid, ports in DESIRED_VLANS.items()
        if ports is not None and sorted(ports) != current.get(vid)
    }
    delete = [
        vid for vid, ports in DESIRED_VLANS.items()
        if ports is None and vid in current and vid != 1
    ]

    print("=== DRY RUN ===")
    print(f"  Create/update : {upsert}")
    print(f"  Delete        : {delete}")
    print()

    if not apply_changes:
        print("Dry-run only -- set APPLY=1 to apply changes.")
        sys.exit(0)

    print("=== APPLYING ===")
    for vid, ports in upsert.items():
        print(f"  {driver.manager.create_port_vlan(vid, ports).message}")
    if delete:
        print(f"  {driver.manager.delete_port_vlans(delete).message}")
    print()
    print("Done.")

except Exception as exc:  # noqa: BLE001
    print(f"ERROR: {exc}", file=sys.stderr)
    sys.exit(1)
finally:
    driver.close()
