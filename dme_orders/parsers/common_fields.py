from typing import List, Optional

import regex

from .base import DEFAULT_TIMEOUT_SEC, _find_all
from .models import OrderRecord, RecoverableMiss

# (atributo del registro, etiqueta para el warning, patrón)
COMMON_FIELDS = (
    ("patient_name", "Patient Name", regex.compile(r"Patient Name:[ \t]*(.*)", regex.IGNORECASE)),
    ("dob", "Date of Birth", regex.compile(r"DOB:[ \t]*(.*)", regex.IGNORECASE)),
    ("diagnosis", "Diagnosis", regex.compile(r"Diagnosis:[ \t]*(.*)", regex.IGNORECASE)),
    (
        "ordering_provider",
        "Ordering Provider",
        regex.compile(r"(?:Ordered by|Ordering Physician:)[ \t]*(Dr\..*)", regex.IGNORECASE),
    ),
)


def extract_info(pattern: regex.Pattern, text: str, timeout: float) -> Optional[str]:
    # una etiqueta vacía no tapa otra posterior con valor
    return next(
        (m.group(1).strip() for m in _find_all(pattern, text, timeout) if m.group(1).strip()),
        None,
    )


def extract_common_fields(
    text: str, record: OrderRecord, timeout: float = DEFAULT_TIMEOUT_SEC
) -> List[RecoverableMiss]:
    """Fill patient name, DOB, diagnosis and ordering provider in place.

    Each field is independent: a miss keeps the record default and yields
    one RecoverableMiss naming the field.
    """
    misses: List[RecoverableMiss] = []
    for attr, label, pattern in COMMON_FIELDS:
        value = extract_info(pattern, text, timeout)
        if value:
            setattr(record, attr, value)
        else:
            misses.append(RecoverableMiss(field=label, message=f"Could not extract {label}."))
    return misses
