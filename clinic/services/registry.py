"""
The clinic registry: patients, doctors and the assignment relation between them.

Key decisions:
- Every collection is an insertion-ordered dict, so "first match" and tie
  breaks follow registration order and never depend on hashing.
- Assignments are an explicit adjacency map of doctor ID -> patient SSNs,
  owned by the registry rather than stored on the entities.
- Registration overwrites silently; re-registering a doctor empties that
  doctor's patient list.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

import structlog

from clinic.config import IngestionConfig, LoggingConfig, get_config
from clinic.domain.exceptions import NoSuchDoctor, NoSuchPatient
from clinic.domain.models import Doctor, Patient
from clinic.services import ingestion
from clinic.services.ingestion import ErrorListener


def configure_logging(config: LoggingConfig) -> None:
    """Configure structlog once for the whole package."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("clinic").setLevel(config.level)


configure_logging(get_config().logging)

logger = structlog.get_logger(__name__)


class Clinic:
    """
    In-memory registry of patients and doctors.

    Single-threaded by assumption: no operation locks, and the line source
    passed to load_data is owned and closed by the caller.
    """

    def __init__(self, config: IngestionConfig | None = None) -> None:
        self.config = config if config is not None else get_config().ingestion
        self._patients: dict[str, Patient] = {}
        self._doctors: dict[int, Doctor] = {}
        self._assignments: dict[int, list[str]] = {}
        self.logger = logger.bind(component="clinic")

    # Registration and lookup

    def add_patient(self, first: str, last: str, ssn: str) -> None:
        """Register a patient; an existing patient with the same SSN is replaced."""
        replaced = ssn in self._patients
        self._patients[ssn] = Patient.create(first, last, ssn)
        self.logger.debug("patient_added", ssn=ssn, replaced=replaced)

    def get_patient(self, ssn: str) -> str:
        """Return the patient formatted as "LAST FIRST (SSN)"."""
        return str(self._require_patient(ssn))

    def add_doctor(
        self, first: str, last: str, ssn: str, doctor_id: int, specialization: str
    ) -> None:
        """Register a doctor with an empty patient list, replacing any doctor with that ID."""
        replaced = doctor_id in self._doctors
        self._doctors[doctor_id] = Doctor.create(first, last, ssn, doctor_id, specialization)
        self._assignments[doctor_id] = []
        self.logger.debug("doctor_added", doctor_id=doctor_id, replaced=replaced)

    def get_doctor(self, doctor_id: int) -> str:
        """Return the doctor formatted as "LAST FIRST (SSN) [ID]: SPECIALIZATION"."""
        return str(self._require_doctor(doctor_id))

    @property
    def patient_count(self) -> int:
        return len(self._patients)

    @property
    def doctor_count(self) -> int:
        return len(self._doctors)

    def patients(self) -> list[Patient]:
        return list(self._patients.values())

    def doctors(self) -> list[Doctor]:
        return list(self._doctors.values())

    # Assignment

    def assign_patient_to_doctor(self, ssn: str, doctor_id: int) -> None:
        """
        Append a patient to a doctor's list.

        Duplicates are allowed: assigning twice lists the patient twice, and
        a patient may appear under several doctors.

        Raises:
            NoSuchPatient: Unknown SSN (checked first)
            NoSuchDoctor: Unknown doctor ID
        """
        self._require_patient(ssn)
        self._require_doctor(doctor_id)
        self._assignments[doctor_id].append(ssn)
        self.logger.debug("patient_assigned", ssn=ssn, doctor_id=doctor_id)

    def get_assigned_doctor(self, ssn: str) -> int:
        """ID of the first doctor, in registration order, with this patient assigned."""
        self._require_patient(ssn)
        for doctor_id, assigned in self._assignments.items():
            if ssn in assigned:
                return doctor_id
        raise NoSuchDoctor(ssn=ssn)

    def get_assigned_patients(self, doctor_id: int) -> list[str]:
        """SSNs assigned to the doctor, in assignment order, duplicates included."""
        self._require_doctor(doctor_id)
        return list(self._assignments[doctor_id])

    # Ingestion

    def load_data(self, lines: Iterable[str], listener: ErrorListener | None = None) -> int:
        """Load patients and doctors from a line source; see clinic.services.ingestion."""
        return ingestion.load_data(self, lines, listener)

    # Reporting

    def idle_doctors(self) -> list[int]:
        """IDs of doctors with no patients, sorted by last name then ID."""
        idle = [
            doctor
            for doctor_id, doctor in self._doctors.items()
            if not self._assignments[doctor_id]
        ]
        idle.sort(key=lambda d: (d.last_name, d.id))
        return [doctor.id for doctor in idle]

    def busy_doctors(self) -> list[int]:
        """
        IDs of doctors whose patient count is strictly above the average.

        The average is taken over doctors with at least one patient. With no
        assigned patients at all there is no average and the result is empty.
        """
        loads = self._patient_counts()
        active = [count for count in loads.values() if count > 0]
        if not active:
            return []

        average = sum(active) / len(active)
        return sorted(doctor_id for doctor_id, count in loads.items() if count > average)

    def doctors_by_num_patients(self) -> list[str]:
        """Lines "### : ID LAST FIRST" for every doctor, most patients first, then by ID."""
        loads = self._patient_counts()
        ranked = sorted(self._doctors.values(), key=lambda d: (-loads[d.id], d.id))
        return [
            f"{loads[doctor.id]:03d} : {doctor.id} {doctor.last_name} {doctor.first_name}"
            for doctor in ranked
        ]

    def count_patients_per_specialization(self) -> list[str]:
        """Lines "### - SPECIALIZATION" by descending count then name; zero totals omitted."""
        totals: dict[str, int] = defaultdict(int)
        for doctor_id, count in self._patient_counts().items():
            totals[self._doctors[doctor_id].specialization] += count

        ranked = sorted(
            ((name, total) for name, total in totals.items() if total > 0),
            key=lambda item: (-item[1], item[0]),
        )
        return [f"{total:03d} - {name}" for name, total in ranked]

    # Internals

    def _patient_counts(self) -> dict[int, int]:
        return {doctor_id: len(assigned) for doctor_id, assigned in self._assignments.items()}

    def _require_patient(self, ssn: str) -> Patient:
        patient = self._patients.get(ssn)
        if patient is None:
            raise NoSuchPatient(ssn)
        return patient

    def _require_doctor(self, doctor_id: int) -> Doctor:
        doctor = self._doctors.get(doctor_id)
        if doctor is None:
            raise NoSuchDoctor(doctor_id)
        return doctor
