"""Typed models for VLAN data."""

from __future__ import annotations

from dataclasses import dataclass, field

from napalm_easysmart.utils.portmask import decode_port_range, ports_to_mask


@dataclass(frozen=True)
class VlanRecord:
    """One VLAN and its port membership.

    The port-based VLAN page only reports membership, so its entries carry
    every member in :attr:`untagged_ports` and an empty :attr:`name`.

    Attributes:
        vlan_id: VLAN identifier (1-4094).
        name: VLAN name, ``""`` when the page does not report one.
        tagged_ports: 1-based ports carrying the VLAN tagged.
        untagged_ports: 1-based ports carrying the VLAN untagged.
    """

    vlan_id: int
    name: str = ""
    tagged_ports: frozenset[int] = field(default_factory=frozenset)
    untagged_ports: frozenset[int] = field(default_factory=frozenset)

    @property
    def member_ports(self) -> list[int]:
        """Sorted union of tagged and untagged ports."""
        return sorted(self.tagged_ports | self.untagged_ports)

    @property
    def member_mask(self) -> int:
        return ports_to_mask(self.member_ports)

    @property
    def port_range(self) -> str:
        """Compact membership string, e.g. ``"1-4,8"``."""
        return decode_port_range(self.member_mask)

    def to_dict(self) -> dict[str, object]:
        return {
            "vlan_id": self.vlan_id,
            "name": self.name,
            "member_ports": self.port_range,
            "tagged_ports": sorted(self.tagged_ports),
            "untagged_ports": sorted(self.untagged_ports),
        }


@dataclass(frozen=True)
class VlanTable:
    """Parsed port-based VLAN page.

    Attributes:
        enabled: ``True`` if port-based VLAN mode is on.
        port_count: Port count reported by the page.
        vlans: VLAN entries in page order.
        length_mismatch: ``True`` when the VLAN-id and membership arrays had
            different lengths and were truncated to the shorter one.
    """

    enabled: bool = False
    port_count: int = 0
    vlans: tuple[VlanRecord, ...] = ()
    length_mismatch: bool = False

    def get(self, vlan_id: int) -> VlanRecord | None:
        return next((v for v in self.vlans if v.vlan_id == vlan_id), None)
