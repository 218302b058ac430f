"""
Core services for the clinic registry.

This package contains the registry itself and the line-oriented ingestion
format that populates it.
"""

from .ingestion import (
    DoctorRecord,
    ErrorListener,
    PatientRecord,
    RecordKind,
    Result,
    load_data,
    parse_line,
    split_fields,
)
from .registry import Clinic, configure_logging

__all__ = [
    "Clinic",
    "configure_logging",
    "DoctorRecord",
    "ErrorListener",
    "PatientRecord",
    "RecordKind",
    "Result",
    "load_data",
    "parse_line",
    "split_fields",
]
