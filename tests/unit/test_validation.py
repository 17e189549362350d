"""Unit tests for napalm_easysmart.client.validation."""

from __future__ import annotations

import pytest

from napalm_easysmart.client.errors import EasySmartValidationError
from napalm_easysmart.client.validation import (
    validate_name,
    validate_port,
    validate_ports,
    validate_speed,
    validate_vlan_id,
    validate_vlan_ids,
)
from napalm_easysmart.model.port import PortSpeed


@pytest.mark.parametrize("port", [1, 24, 48])
def test_valid_ports(port: int) -> None:
    assert validate_port(port) == port


@pytest.mark.parametrize("port", [0, 49, True, "1", None])
def test_invalid_ports(port: object) -> None:
    with pytest.raises(EasySmartValidationError):
        validate_port(port)  # type: ignore[arg-type]


def test_validate_ports_preserves_order() -> None:
    assert validate_ports([5, 1, 3]) == [5, 1, 3]


def test_validate_ports_rejects_duplicates_and_empty() -> None:
    with pytest.raises(EasySmartValidationError):
        validate_ports([1, 1])
    with pytest.raises(EasySmartValidationError):
        validate_ports([])


@pytest.mark.parametrize("vid", [1, 4094])
def test_vlan_id_bounds(vid: int) -> None:
    assert validate_vlan_id(vid) == vid


@pytest.mark.parametrize("vid", [0, 4095, -5])
def test_vlan_id_out_of_range(vid: int) -> None:
    with pytest.raises(EasySmartValidationError):
        validate_vlan_id(vid)


def test_vlan_ids_duplicates() -> None:
    with pytest.raises(EasySmartValidationError):
        validate_vlan_ids([10, 10])


def test_speed_settable_range() -> None:
    assert validate_speed(1) == PortSpeed.AUTO
    assert validate_speed(6) == PortSpeed.M1000_FULL
    with pytest.raises(EasySmartValidationError):
        validate_speed(PortSpeed.LINK_DOWN)


def test_validation_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        validate_vlan_id(0)


class TestValidateName:
    def test_accepts_empty_by_default(self) -> None:
        assert validate_name("") == ""

    def test_max_length(self) -> None:
        assert validate_name("x" * 32) == "x" * 32
        with pytest.raises(EasySmartValidationError):
            validate_name("x" * 33)

    @pytest.mark.parametrize("name", ["a^b", "tab\there", "new\nline"])
    def test_rejects_delimiter_and_control_chars(self, name: str) -> None:
        with pytest.raises(EasySmartValidationError):
            validate_name(name)
