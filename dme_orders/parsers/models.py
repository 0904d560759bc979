# ===============================
# File: dme_orders/parsers/models.py
# ===============================
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

UNKNOWN = "Unknown"


class Device(str, Enum):
    CPAP = "CPAP"
    OXYGEN_TANK = "Oxygen Tank"
    WHEELCHAIR = "Wheelchair"
    WALKING_AID = "Walking Aid"
    UNKNOWN = UNKNOWN


@dataclass
class OrderRecord:
    device: Device = Device.UNKNOWN
    patient_name: str = UNKNOWN
    dob: str = UNKNOWN
    diagnosis: str = UNKNOWN
    ordering_provider: str = UNKNOWN
    qualifier: Optional[str] = ""  # None only when cleared (Walking Aid)
    liters: Optional[str] = None  # Oxygen Tank, e.g. "2 L"
    mask_type: Optional[str] = None  # CPAP
    add_ons: Optional[List[str]] = None  # None when nothing matched, never []
    usage: Optional[str] = None  # Oxygen Tank


@dataclass(frozen=True)
class RecoverableMiss:
    field: str
    message: str


@dataclass
class ExtractionResult:
    record: OrderRecord
    warnings: List[RecoverableMiss] = field(default_factory=list)
