"""Low-level port write operations for Easy Smart switches.

Translates a typed request into the exact form payload the console's port
settings page submits and delegates to
:class:`~napalm_easysmart.client.session.EasySmartSession` for dispatch.

Payload (PortSettingRpm.htm "Apply" button):

    PORT 3 ENABLED, AUTO, FLOW OFF: POST /port_setting.cgi
        portid=3^&state=1^&speed=1^&flowcontrol=0^&apply=Apply
        → HTTP 200 (body not checked)

Fields:
    portid:       1-based port number
    state:        "1" = Enable, "0" = Disable
    speed:        :class:`~napalm_easysmart.model.port.PortSpeed` code (1..6)
    flowcontrol:  "1" = On, "0" = Off
"""

from __future__ import annotations

import logging

from napalm_easysmart.client.session import EasySmartSession, suffixed
from napalm_easysmart.client.validation import validate_port, validate_speed
from napalm_easysmart.model.port import PortSpeed
from napalm_easysmart.vendor.easysmart.endpoints import PORT_CONFIG

logger = logging.getLogger(__name__)


def set_port_config(
    session: EasySmartSession,
    port: int,
    enabled: bool,
    speed: int = PortSpeed.AUTO,
    flow_control: bool = False,
) -> None:
    """Configure admin state, speed/duplex and flow control of one port.

    Args:
        session: Active authenticated session.
        port: 1-based port number (1..48).
        enabled: ``True`` to enable the port.
        speed: Speed code, :attr:`PortSpeed.AUTO` through
            :attr:`PortSpeed.M1000_FULL`.
        flow_control: ``True`` to enable flow control.

    Raises:
        EasySmartValidationError: On an invalid port or speed (no request sent).
        EasySmartRequestError: On transport failure.
        EasySmartResponseError: On a non-2xx reply.
    """
    payload = build_port_payload(port, enabled, speed, flow_control)
    logger.debug("Setting port %d: %s", port, payload)
    session.post_form(PORT_CONFIG, data=payload)
    logger.info("Port %d configuration applied", port)


def build_port_payload(
    port: int,
    enabled: bool,
    speed: int = PortSpeed.AUTO,
    flow_control: bool = False,
) -> dict[str, str]:
    """Build the validated form dict for :func:`set_port_config`."""
    validate_port(port)
    code = validate_speed(speed)
    return {
        "portid": suffixed(port),
        "state": suffixed(1 if enabled else 0),
        "speed": suffixed(int(code)),
        "flowcontrol": suffixed(1 if flow_control else 0),
        "apply": "Apply",
    }
