from typing import Callable, Dict

import regex

from .base import _contains, _search, keyword_pattern
from .models import Device, OrderRecord

CPAP_MASK_TYPES = tuple((k, keyword_pattern(k)) for k in ("full face",))
CPAP_ADD_ONS = tuple((k, keyword_pattern(k)) for k in ("humidifier",))
OXYGEN_USAGES = tuple((k, keyword_pattern(k)) for k in ("sleep", "exertion"))
WALKING_AID_TYPES = tuple(
    (k, keyword_pattern(k)) for k in ("walker", "cane", "crutches", "knee scooter")
)

AHI_RE = regex.compile(r"AHI\s*(>|<|=|:)\s*(\d+)", regex.IGNORECASE)
LITERS_RE = regex.compile(r"(\d+(?:\.\d+)?) ?L", regex.IGNORECASE)


def parse_cpap(text: str, record: OrderRecord, timeout: float) -> None:
    record.mask_type = next(
        (mask for mask, p in CPAP_MASK_TYPES if _contains(p, text, timeout)), None
    )

    found = [addon for addon, p in CPAP_ADD_ONS if _contains(p, text, timeout)]
    if found:
        record.add_ons = found

    m = _search(AHI_RE, text, timeout)
    if m:
        op, value = m.group(1), m.group(2)
        # "AHI: 28" conserva los dos puntos pegados; el resto va con espacios
        record.qualifier = f"AHI: {value}" if op == ":" else f"AHI {op} {value}"


def parse_oxygen(text: str, record: OrderRecord, timeout: float) -> None:
    m = _search(LITERS_RE, text, timeout)
    if m:
        record.liters = f"{m.group(1)} L"

    usages = [u for u, p in OXYGEN_USAGES if _contains(p, text, timeout)]
    if usages:
        record.usage = " and ".join(usages)


def parse_walking_aid(text: str, record: OrderRecord, timeout: float) -> None:
    record.mask_type = None
    record.liters = None
    record.usage = None
    record.add_ons = None
    record.qualifier = None

    subtype = next((t for t, p in WALKING_AID_TYPES if _contains(p, text, timeout)), None)
    if subtype:
        record.qualifier = f"Type: {subtype}"


def _no_details(text: str, record: OrderRecord, timeout: float) -> None:
    return None


DETAIL_PARSERS: Dict[Device, Callable[[str, OrderRecord, float], None]] = {
    Device.CPAP: parse_cpap,
    Device.OXYGEN_TANK: parse_oxygen,
    Device.WALKING_AID: parse_walking_aid,
    Device.WHEELCHAIR: _no_details,
}


def parse_device_details(text: str, record: OrderRecord, timeout: float) -> None:
    """Run the extractor for record.device; unknown devices get nothing extra."""
    DETAIL_PARSERS.get(record.device, _no_details)(text, record, timeout)
