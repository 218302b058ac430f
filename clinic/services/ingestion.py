"""
Line-oriented ingestion of patient and doctor records.

Format, one record per line, fields separated by ';' with surrounding
whitespace ignored:

    P;first;last;ssn
    M;id;first;last;ssn;specialization

Malformed lines are skipped. In silent mode each rejection is logged; in
notified mode the caller's listener receives (line_number, line) instead.
Doctor IDs are signed 32-bit integers. A doctor line whose ID is not one
aborts the whole load unless IngestionConfig.skip_invalid_doctor_id is set.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog

from clinic.config import IngestionConfig
from clinic.domain.exceptions import InvalidDoctorId, MalformedLine

if TYPE_CHECKING:
    from clinic.services.registry import Clinic

logger = structlog.get_logger(__name__)

ErrorListener = Callable[[int, str], None]

_INTEGER = re.compile(r"[+-]?\d+")
_ID_RANGE = range(-(2**31), 2**31)

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


@dataclass(frozen=True)
class Result(Generic[ValueT, ErrorT]):
    """Outcome of parsing one line: the record, or the reason it was rejected."""

    value: ValueT | None = None
    error: ErrorT | None = None

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> ValueT:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore


class RecordKind(str, Enum):
    """Record tags recognised at the start of a line."""

    PATIENT = "P"
    DOCTOR = "M"


_FIELD_COUNTS = {RecordKind.PATIENT: 4, RecordKind.DOCTOR: 6}


@dataclass(frozen=True)
class PatientRecord:
    first_name: str
    last_name: str
    ssn: str


@dataclass(frozen=True)
class DoctorRecord:
    doctor_id: int
    first_name: str
    last_name: str
    ssn: str
    specialization: str


ParsedRecord = PatientRecord | DoctorRecord


def split_fields(line: str, separator: str = ";") -> list[str]:
    """Split a line on the separator, dropping trailing empty fields."""
    parts = line.split(separator)
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


def _classify(line: str) -> RecordKind | None:
    for kind in RecordKind:
        if line.startswith(kind.value):
            return kind
    return None


def parse_line(line: str, separator: str = ";") -> Result[ParsedRecord, MalformedLine]:
    """Parse one line (already stripped) into a patient or doctor record."""
    if not line:
        return Result.err(MalformedLine(line, "empty line"))

    kind = _classify(line)
    if kind is None:
        return Result.err(MalformedLine(line, "unknown record tag"))

    parts = split_fields(line, separator)
    if len(parts) != _FIELD_COUNTS[kind]:
        return Result.err(
            MalformedLine(line, f"expected {_FIELD_COUNTS[kind]} fields, got {len(parts)}")
        )

    fields = [part.strip() for part in parts[1:]]

    if kind is RecordKind.PATIENT:
        first, last, ssn = fields
        return Result.ok(PatientRecord(first_name=first, last_name=last, ssn=ssn))

    raw_id, first, last, ssn, specialization = fields
    if not _INTEGER.fullmatch(raw_id) or int(raw_id) not in _ID_RANGE:
        return Result.err(InvalidDoctorId(line, raw_id))
    return Result.ok(
        DoctorRecord(
            doctor_id=int(raw_id),
            first_name=first,
            last_name=last,
            ssn=ssn,
            specialization=specialization,
        )
    )


def load_data(
    clinic: "Clinic",
    lines: Iterable[str],
    listener: ErrorListener | None = None,
    config: IngestionConfig | None = None,
) -> int:
    """
    Register every valid record from a line source into the clinic.

    Args:
        clinic: Registry receiving the records
        lines: Any iterable of text lines (open file, StringIO, list)
        listener: Called with (1-based line number, stripped line) for each
            rejected line. When omitted, rejections are logged instead.
        config: Ingestion settings, defaulting to the clinic's own

    Returns:
        Number of lines that resulted in a successful add.

    Raises:
        InvalidDoctorId: A doctor ID is not an integer and skipping is disabled.
    """
    if config is None:
        config = clinic.config
    log = logger.bind(mode="silent" if listener is None else "notified")

    processed = 0
    rejected = 0
    line_number = 0

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        result = parse_line(line, config.field_separator)

        if result.is_err():
            error = result.error
            if isinstance(error, InvalidDoctorId) and not config.skip_invalid_doctor_id:
                error.line_number = line_number
                log.error("data_load_aborted", line_number=line_number, value=error.value)
                raise error

            rejected += 1
            if listener is None:
                log.warning(
                    "invalid_line_skipped", line_number=line_number, line=line, reason=error.reason
                )
            else:
                listener(line_number, line)
            continue

        record = result.unwrap()
        if isinstance(record, PatientRecord):
            clinic.add_patient(record.first_name, record.last_name, record.ssn)
        else:
            clinic.add_doctor(
                record.first_name,
                record.last_name,
                record.ssn,
                record.doctor_id,
                record.specialization,
            )
        processed += 1

    log.info("data_loaded", processed=processed, rejected=rejected, lines_read=line_number)
    return processed
