"""Parser for the port-based VLAN page (VlanPortBasicRpm.htm).

Membership is published as two parallel arrays, VLAN ids and port
bitmasks, the latter either decimal or ``0x`` hex::

    var pvlan_ds = {
        state:1,
        portNum:8,
        vids:[1,10,20],
        mbrs:[0xFF,0x05,0x02],
        count:3
    };
"""

from __future__ import annotations

import logging

from napalm_easysmart.model.vlan import VlanRecord, VlanTable
from napalm_easysmart.parser.script import find_int_array, find_int_var
from napalm_easysmart.utils.portmask import mask_to_ports
from napalm_easysmart.vendor.easysmart.mappings import (
    DEFAULT_MAX_PORTS,
    MAX_VLAN_ID,
    MIN_VLAN_ID,
)

logger = logging.getLogger(__name__)


def parse_vlan_table(body: str) -> VlanTable:
    """Parse the port-based VLAN page.

    The id and membership arrays are zipped.  When their lengths differ
    both are truncated to the shorter one and :attr:`.VlanTable.length_mismatch`
    is set; pairs with an unparseable element, an out-of-range id or a
    negative membership mask are skipped.

    Args:
        body: Raw HTML from ``VlanPortBasicRpm.htm``.

    Returns:
        Parsed :class:`.VlanTable` (empty if nothing matched).
    """
    enabled = find_int_var(body, "state") == 1
    port_count = find_int_var(body, "portNum")
    if port_count is None:
        port_count = DEFAULT_MAX_PORTS

    vids = find_int_array(body, "vids")
    mbrs = find_int_array(body, "mbrs")

    mismatch = len(vids) != len(mbrs)
    if mismatch:
        logger.warning(
            "VLAN id array has %d entries but membership array has %d; "
            "truncating to %d",
            len(vids),
            len(mbrs),
            min(len(vids), len(mbrs)),
        )

    vlans: list[VlanRecord] = []
    for vid, mask in zip(vids, mbrs):
        if vid is None or mask is None or mask < 0 or not MIN_VLAN_ID <= vid <= MAX_VLAN_ID:
            logger.debug("Skipping malformed VLAN entry vid=%r mask=%r", vid, mask)
            continue
        vlans.append(
            VlanRecord(vlan_id=vid, untagged_ports=frozenset(mask_to_ports(mask)))
        )

    return VlanTable(
        enabled=enabled,
        port_count=port_count,
        vlans=tuple(vlans),
        length_mismatch=mismatch,
    )
