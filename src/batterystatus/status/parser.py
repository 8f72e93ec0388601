"""Parsing of ``pmset`` battery and AC adapter reports.

Each extractor pulls one optional field out of loosely formatted text.
``parse_power_status`` composes them and fails only when one of the two
required fields (percentage, charge state) is absent.

Example battery report::

    Now drawing from 'Battery Power'
     -InternalBattery-0 (id=1234567)	35%; discharging; 2:10 remaining present: true

Example AC adapter report::

    Wattage = 61.0
    Current = 3000mA
    Voltage = 20000mV
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Final

from batterystatus.common.enums import ChargeState
from batterystatus.status.errors import ParseError, ParseFailure
from batterystatus.status.models import PowerStatus, RemainingTime

logger: Final = logging.getLogger(__name__)

PERCENTAGE_RE: Final = re.compile(r"(\d+)%")
STATE_RE: Final = re.compile(r"(charging|discharging|charged|finishing charge)", re.IGNORECASE)
REMAINING_RE: Final = re.compile(r"(\d+):(\d+)")
WATTAGE_RE: Final = re.compile(r"Wattage\s*=\s*(\d+(?:\.\d+)?)")


def extract_percentage(text: str) -> int | None:
    """Return the first integer directly followed by ``%``."""
    match = PERCENTAGE_RE.search(text)
    if not match:
        return None
    return min(int(match.group(1)), 100)


def extract_charge_state(text: str) -> ChargeState | None:
    """Return the first charge state keyword in *text*."""
    match = STATE_RE.search(text)
    if not match:
        return None
    return ChargeState.from_text(match.group(1))


def extract_remaining_time(text: str) -> RemainingTime | None:
    """Return the first ``H:MM`` token, ignoring out-of-range minutes."""
    match = REMAINING_RE.search(text)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59:
        logger.debug("Ignoring malformed remaining time %r", match.group(0))
        return None
    return RemainingTime(hours=hours, minutes=minutes)


def extract_wattage(text: str) -> Decimal | None:
    """Return the first positive decimal after a ``Wattage`` label."""
    match = WATTAGE_RE.search(text)
    if not match:
        return None
    try:
        watts = Decimal(match.group(1))
    except InvalidOperation:  # pragma: no cover - regex only admits digits
        return None
    return watts if watts > 0 else None


def parse_power_status(battery_text: str, adapter_text: str) -> PowerStatus:
    """Build a PowerStatus from raw ``pmset -g batt`` and ``pmset -g ac`` text.

    Args:
        battery_text: Battery snapshot output
        adapter_text: AC adapter snapshot output

    Returns:
        Validated PowerStatus

    Raises:
        ParseError: If the percentage or the charge state is missing
    """
    percentage = extract_percentage(battery_text)
    if percentage is None:
        raise ParseError(ParseFailure.MISSING_PERCENTAGE, battery_text)

    state = extract_charge_state(battery_text)
    if state is None:
        raise ParseError(ParseFailure.MISSING_STATE, battery_text)

    remaining = extract_remaining_time(battery_text)
    wattage = extract_wattage(adapter_text)

    # A full battery has no meaningful estimate and a discharging one no charger
    if state is ChargeState.CHARGED:
        remaining = None
    if state is ChargeState.DISCHARGING:
        wattage = None

    status = PowerStatus(
        percentage=percentage,
        charge_state=state,
        remaining_time=remaining,
        wattage=wattage,
    )
    logger.debug("Parsed power status: %s / %s", status.display_title, status.display_subtitle)
    return status
