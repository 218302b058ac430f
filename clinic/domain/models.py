"""
Domain models for the clinic registry.

These models represent the core business concepts and are framework-agnostic.
Patients and doctors share a person shape by embedding a PersonInfo value
rather than inheriting from a common base.
"""

from pydantic import BaseModel, ConfigDict, Field


class PersonInfo(BaseModel):
    """Identity fields shared by patients and doctors. SSN is an opaque string."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    ssn: str

    def __str__(self) -> str:
        return f"{self.last_name} {self.first_name} ({self.ssn})"


class _PersonRecord(BaseModel):
    """Accessors over an embedded PersonInfo."""

    model_config = ConfigDict(frozen=True)

    person: PersonInfo

    @property
    def first_name(self) -> str:
        return self.person.first_name

    @property
    def last_name(self) -> str:
        return self.person.last_name

    @property
    def ssn(self) -> str:
        return self.person.ssn


class Patient(_PersonRecord):
    """A clinic patient, identified by SSN."""

    @classmethod
    def create(cls, first_name: str, last_name: str, ssn: str) -> "Patient":
        return cls(person=PersonInfo(first_name=first_name, last_name=last_name, ssn=ssn))

    def __str__(self) -> str:
        return str(self.person)


class Doctor(_PersonRecord):
    """A doctor working at the clinic, identified by an externally assigned badge ID."""

    id: int = Field(description="Badge ID, unique within the clinic")
    specialization: str = Field(description="Free-form specialization name")

    @classmethod
    def create(
        cls, first_name: str, last_name: str, ssn: str, doctor_id: int, specialization: str
    ) -> "Doctor":
        return cls(
            person=PersonInfo(first_name=first_name, last_name=last_name, ssn=ssn),
            id=doctor_id,
            specialization=specialization,
        )

    def __str__(self) -> str:
        return f"{self.person} [{self.id}]: {self.specialization}"
