"""System-level commands for Easy Smart switches.

All of these are plain form POSTs; the console gives no confirmation text,
so a 2xx status is the only success signal.

Payloads:

    REBOOT:        POST /reboot.cgi          reboot_op=reboot^&save_op=false
    SAVE CONFIG:   POST /savingconfig.cgi    action_op=save^
    SYSTEM NAME:   POST /system_name_set.cgi sysName=core-sw^
    LED:           POST /led_on_set.cgi      rd_led=1^&led_cfg=Apply
    FACTORY RESET: POST /reset.cgi           reset_op=factory^
"""

from __future__ import annotations

import logging

from napalm_easysmart.client.session import EasySmartSession, suffixed
from napalm_easysmart.client.validation import validate_name
from napalm_easysmart.vendor.easysmart.endpoints import (
    FACTORY_RESET,
    LED_CONTROL,
    REBOOT,
    SAVE_CONFIG,
    SYSTEM_NAME,
)

logger = logging.getLogger(__name__)


def reboot(session: EasySmartSession, save_config: bool = False) -> None:
    """Reboot the switch, optionally saving the running configuration first.

    The switch drops the web session while it restarts.
    """
    logger.warning("Rebooting %s (save_config=%s)", session.display_host, save_config)
    session.post_form(
        REBOOT,
        data={
            "reboot_op": suffixed("reboot"),
            "save_op": "true" if save_config else "false",
        },
    )


def save_config(session: EasySmartSession) -> None:
    """Persist the running configuration to flash."""
    logger.debug("Saving configuration on %s", session.display_host)
    session.post_form(SAVE_CONFIG, data={"action_op": suffixed("save")})
    logger.info("Configuration saved on %s", session.display_host)


def set_system_name(session: EasySmartSession, name: str) -> None:
    """Set the device description shown on the system information page.

    Raises:
        EasySmartValidationError: If *name* is empty, too long or contains
            the ``^`` delimiter.
    """
    payload = build_system_name_payload(name)
    logger.debug("Setting system name on %s to %r", session.display_host, name)
    session.post_form(SYSTEM_NAME, data=payload)


def set_led(session: EasySmartSession, enabled: bool) -> None:
    """Switch the front-panel port LEDs on or off."""
    logger.debug("Setting LEDs on %s to %s", session.display_host, "on" if enabled else "off")
    session.post_form(
        LED_CONTROL,
        data={"rd_led": suffixed(1 if enabled else 0), "led_cfg": "Apply"},
    )


def factory_reset(session: EasySmartSession) -> None:
    """Restore factory defaults.  The switch reboots and forgets its IP setup."""
    logger.warning("Factory reset requested for %s", session.display_host)
    session.post_form(FACTORY_RESET, data={"reset_op": suffixed("factory")})


def build_system_name_payload(name: str) -> dict[str, str]:
    validate_name(name, what="System name", allow_empty=False)
    return {"sysName": suffixed(name)}
