#!/usr/bin/env python3
"""Example: print the port-based VLAN table and a cable test of ports 1-2."""

from __future__ import annotations

import json

from napalm_easysmart.driver import EasySmartDriver

# Replace with real switch credentials
HOST = "192.168.0.1"
USER = "admin"
PASS = "admin"

with EasySmartDriver(HOST, USER, PASS) as device:
    vlans = device.get_vlans()
    cables = device.cable_test([1, 2])

print(json.dumps(vlans, indent=2))
print(json.dumps(cables, indent=2))
