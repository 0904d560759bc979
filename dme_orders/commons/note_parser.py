from typing import Dict, Optional

from pydantic import ValidationError

from dme_orders.commons.errors import (
    ExtractionTimeoutError,
    InvalidInputError,
    SerializationError,
    UnexpectedFailureError,
)
from dme_orders.commons.logger import logger
from dme_orders.commons.types import OrderPayload
from dme_orders.parsers.base import DEFAULT_TIMEOUT_SEC, detect_device
from dme_orders.parsers.common_fields import extract_common_fields
from dme_orders.parsers.devices import parse_device_details
from dme_orders.parsers.models import (
    UNKNOWN,
    Device,
    ExtractionResult,
    OrderRecord,
    RecoverableMiss,
)
from dme_orders.validation.validators import validate_note_or_raise


class NoteParser:
    """Turns a physician note into an OrderRecord.

    Stateless between calls: the catalogs and compiled patterns live at module
    level and are only read, so one instance can be shared across threads.
    """

    def __init__(self, pattern_timeout_sec: float = DEFAULT_TIMEOUT_SEC):
        self.timeout = pattern_timeout_sec

    def parse(self, note_text: str) -> OrderRecord:
        return self.extract(note_text).record

    def extract(self, note_text: str) -> ExtractionResult:
        text = validate_note_or_raise(note_text)
        try:
            result = self._run_pipeline(text)
        except (InvalidInputError, ExtractionTimeoutError):
            raise
        except Exception as ex:
            logger.exception(f"Fallo inesperado extrayendo nota ({len(text)} caracteres): {ex}")
            raise UnexpectedFailureError(str(ex)) from ex

        for w in result.warnings:
            logger.warning(w.message)
        logger.info(
            f"Parsed note: device={result.record.device.value}, warnings={len(result.warnings)}"
        )
        return result

    def _run_pipeline(self, text: str) -> ExtractionResult:
        record = OrderRecord()
        warnings = []

        record.device = detect_device(text, self.timeout)
        if record.device is Device.UNKNOWN:
            warnings.append(
                RecoverableMiss(
                    field="Device",
                    message=f"Could not determine device from note. Using default: {UNKNOWN}",
                )
            )

        warnings.extend(extract_common_fields(text, record, self.timeout))
        parse_device_details(text, record, self.timeout)
        return ExtractionResult(record=assemble_order(record), warnings=warnings)


def assemble_order(record: OrderRecord) -> OrderRecord:
    """Apply defaults wherever an extractor left a field unset."""
    record.device = record.device or Device.UNKNOWN
    for attr in ("patient_name", "dob", "diagnosis", "ordering_provider"):
        if not getattr(record, attr):
            setattr(record, attr, UNKNOWN)
    # Walking Aid limpia el qualifier a propósito; no se repone
    if record.qualifier is None and record.device is not Device.WALKING_AID:
        record.qualifier = ""
    if record.add_ons is not None and not record.add_ons:
        record.add_ons = None
    return record


def build_payload(record: OrderRecord) -> OrderPayload:
    try:
        return OrderPayload(
            device=record.device.value,
            patient_name=record.patient_name,
            dob=record.dob,
            diagnosis=record.diagnosis,
            ordering_provider=record.ordering_provider,
            qualifier=record.qualifier,
            liters=record.liters,
            mask_type=record.mask_type,
            add_ons=list(record.add_ons) if record.add_ons is not None else None,
            usage=record.usage,
        )
    except (ValidationError, AttributeError, TypeError) as ex:
        raise SerializationError(f"No se pudo serializar la orden: {ex}") from ex


def to_payload(record: OrderRecord) -> Dict:
    return build_payload(record).model_dump(exclude_none=True)


def to_json(record: OrderRecord, indent: Optional[int] = None) -> str:
    payload = build_payload(record)
    try:
        return payload.model_dump_json(exclude_none=True, indent=indent)
    except ValueError as ex:
        raise SerializationError(f"No se pudo serializar la orden: {ex}") from ex
