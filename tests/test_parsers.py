# flake8: noqa

import pytest
import regex

from dme_orders.commons.errors import ExtractionTimeoutError
from dme_orders.parsers.base import DEVICE_KEYWORDS, _search, detect_device
from dme_orders.parsers.common_fields import extract_common_fields
from dme_orders.parsers.devices import (
    CPAP_ADD_ONS,
    CPAP_MASK_TYPES,
    OXYGEN_USAGES,
    WALKING_AID_TYPES,
    parse_device_details,
)
from dme_orders.parsers.models import Device, OrderRecord

TIMEOUT = 1.0

OXYGEN_NOTE = """Patient Name: Harold Finch
DOB: 04/12/1952
Diagnosis: COPD
Prescription: Requires a portable oxygen tank delivering 2 L per minute.
Usage: During sleep and exertion.
Ordered by Dr. Cuddy
"""


def details(text: str, device: Device) -> OrderRecord:
    record = OrderRecord(device=device)
    parse_device_details(text, record, TIMEOUT)
    return record


# ----------------- Clasificador -----------------
@pytest.mark.parametrize(
    "text,expected",
    [
        ("Order for CPAP machine.", Device.CPAP),
        ("needs OXYGEN at home", Device.OXYGEN_TANK),
        ("Standard Wheelchair for mobility", Device.WHEELCHAIR),
        ("Rolling walker", Device.WALKING_AID),
        ("quad cane", Device.WALKING_AID),
        ("Crutches, pair", Device.WALKING_AID),
        ("knee scooter rental", Device.WALKING_AID),
        ("Patient requires mobility assistance.", Device.UNKNOWN),
    ],
)
def test_detect_device(text, expected):
    assert detect_device(text, TIMEOUT) is expected


def test_detect_device_uses_catalog_order_not_text_position():
    assert detect_device("Portable oxygen tank, also a CPAP machine.", TIMEOUT) is Device.CPAP
    assert detect_device("walker now, wheelchair later", TIMEOUT) is Device.WHEELCHAIR


def test_search_timeout_becomes_extraction_timeout():
    class SlowPattern:
        pattern = "(a+)+$"

        def search(self, text, timeout=None):
            raise TimeoutError("regex timed out")

    with pytest.raises(ExtractionTimeoutError):
        _search(SlowPattern(), "aaaa", 0.01)


# ----------------- Campos comunes -----------------
def test_common_fields_full_note():
    record = OrderRecord()
    misses = extract_common_fields(OXYGEN_NOTE, record, TIMEOUT)
    assert misses == []
    assert record.patient_name == "Harold Finch"
    assert record.dob == "04/12/1952"
    assert record.diagnosis == "COPD"
    assert record.ordering_provider == "Dr. Cuddy"


def test_common_fields_are_independent():
    record = OrderRecord()
    misses = extract_common_fields("dob: 01/02/1970\nSome text", record, TIMEOUT)
    assert record.dob == "01/02/1970"
    assert record.patient_name == "Unknown"
    assert [m.field for m in misses] == ["Patient Name", "Diagnosis", "Ordering Provider"]
    assert misses[0].message == "Could not extract Patient Name."


def test_ordering_physician_label():
    record = OrderRecord()
    extract_common_fields("Ordering Physician: Dr. Wilson  \n", record, TIMEOUT)
    assert record.ordering_provider == "Dr. Wilson"


def test_ordered_by_without_doctor_token_is_a_miss():
    record = OrderRecord()
    misses = extract_common_fields("Ordered by nurse Jackie", record, TIMEOUT)
    assert record.ordering_provider == "Unknown"
    assert "Ordering Provider" in [m.field for m in misses]


# ----------------- CPAP -----------------
@pytest.mark.parametrize(
    "text,mask,add_ons,qualifier",
    [
        ("CPAP with full face mask.", "full face", None, ""),
        ("CPAP with heated humidifier.", None, ["humidifier"], ""),
        ("CPAP with AHI: 28", None, None, "AHI: 28"),
        ("CPAP with AHI = 28", None, None, "AHI = 28"),
        ("CPAP with AHI > 28", None, None, "AHI > 28"),
        ("CPAP with AHI < 28", None, None, "AHI < 28"),
        ("CPAP with Full Face mask, Humidifier, ahi>30", "full face", ["humidifier"], "AHI > 30"),
    ],
)
def test_cpap_details(text, mask, add_ons, qualifier):
    record = details(text, Device.CPAP)
    assert record.mask_type == mask
    assert record.add_ons == add_ons
    assert record.qualifier == qualifier
    assert record.liters is None and record.usage is None


# ----------------- Oxígeno -----------------
@pytest.mark.parametrize(
    "text,liters,usage",
    [
        ("Requires oxygen during sleep.", None, "sleep"),
        ("Requires oxygen during exertion.", None, "exertion"),
        ("Requires 2.5L of oxygen during sleep.", "2.5 L", "sleep"),
        ("Oxygen 3 L, exertion and sleep", "3 L", "sleep and exertion"),
        ("Oxygen at home", None, None),
    ],
)
def test_oxygen_details(text, liters, usage):
    record = details(text, Device.OXYGEN_TANK)
    assert record.liters == liters
    assert record.usage == usage
    assert record.mask_type is None and record.add_ons is None


# ----------------- Walking Aid / Wheelchair -----------------
def test_walking_aid_clears_foreign_fields():
    record = OrderRecord(
        device=Device.WALKING_AID, mask_type="full face", liters="2 L", usage="sleep", add_ons=["x"]
    )
    parse_device_details("cane with full face humidifier at 2 L during sleep", record, TIMEOUT)
    assert record.mask_type is None
    assert record.liters is None
    assert record.usage is None
    assert record.add_ons is None
    assert record.qualifier == "Type: cane"


def test_walking_aid_subtype_order():
    assert details("crutches or a walker", Device.WALKING_AID).qualifier == "Type: walker"
    assert details("Knee Scooter", Device.WALKING_AID).qualifier == "Type: knee scooter"


@pytest.mark.parametrize("device", [Device.WHEELCHAIR, Device.UNKNOWN])
def test_no_details_for_wheelchair_or_unknown(device):
    record = details("full face humidifier AHI > 20 2 L sleep", device)
    assert record == OrderRecord(device=device)


def test_keyword_catalogs_are_precompiled():
    for _, pattern, _ in DEVICE_KEYWORDS:
        assert isinstance(pattern, regex.Pattern)
    for catalog in (CPAP_MASK_TYPES, CPAP_ADD_ONS, OXYGEN_USAGES, WALKING_AID_TYPES):
        for keyword, pattern in catalog:
            assert pattern.search(keyword.upper()) is not None


def test_detect_device_real_timeout_on_huge_note():
    with pytest.raises(ExtractionTimeoutError):
        detect_device("x" * 5_000_000 + " CPAP", 1e-7)


def test_empty_label_does_not_hide_later_value():
    record = OrderRecord()
    misses = extract_common_fields("Patient Name:\nCPAP\nPatient Name: Bob", record, TIMEOUT)
    assert record.patient_name == "Bob"
    assert "Patient Name" not in [m.field for m in misses]


def test_only_empty_labels_is_a_miss():
    record = OrderRecord()
    misses = extract_common_fields("Diagnosis:   \nDiagnosis:\n", record, TIMEOUT)
    assert record.diagnosis == "Unknown"
    assert "Diagnosis" in [m.field for m in misses]
