from typing import List, Optional

import regex

from dme_orders.commons.errors import ExtractionTimeoutError
from .models import Device

DEFAULT_TIMEOUT_SEC = 1.0


def keyword_pattern(keyword: str) -> regex.Pattern:
    return regex.compile(regex.escape(keyword), regex.IGNORECASE)


# Orden de la lista manda: la primera palabra clave presente gana,
# no la que aparece primero en el texto.
DEVICE_KEYWORDS = tuple(
    (keyword, keyword_pattern(keyword), device)
    for keyword, device in (
        ("CPAP", Device.CPAP),
        ("oxygen", Device.OXYGEN_TANK),
        ("wheelchair", Device.WHEELCHAIR),
        ("walker", Device.WALKING_AID),
        ("cane", Device.WALKING_AID),
        ("crutches", Device.WALKING_AID),
        ("knee scooter", Device.WALKING_AID),
    )
)


def _timed_out(pattern: regex.Pattern, timeout: float) -> ExtractionTimeoutError:
    return ExtractionTimeoutError(f"Pattern {pattern.pattern!r} exceeded {timeout}s")


def _search(pattern: regex.Pattern, text: str, timeout: float) -> Optional[regex.Match]:
    try:
        return pattern.search(text, timeout=timeout)
    except TimeoutError as ex:
        raise _timed_out(pattern, timeout) from ex


def _find_all(pattern: regex.Pattern, text: str, timeout: float) -> List[regex.Match]:
    try:
        return list(pattern.finditer(text, timeout=timeout))
    except TimeoutError as ex:
        raise _timed_out(pattern, timeout) from ex


def _contains(pattern: regex.Pattern, text: str, timeout: float) -> bool:
    """Keyword test under the same time bound as _search."""
    return _search(pattern, text, timeout) is not None


def detect_device(text: str, timeout: float = DEFAULT_TIMEOUT_SEC) -> Device:
    """Return the device of the first catalog entry found, or Device.UNKNOWN."""
    return next(
        (device for _, pattern, device in DEVICE_KEYWORDS if _contains(pattern, text, timeout)),
        Device.UNKNOWN,
    )
