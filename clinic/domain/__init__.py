"""Domain models and errors for the clinic registry."""

from .exceptions import ClinicError, InvalidDoctorId, MalformedLine, NoSuchDoctor, NoSuchPatient
from .models import Doctor, Patient, PersonInfo

__all__ = [
    "ClinicError",
    "InvalidDoctorId",
    "MalformedLine",
    "NoSuchDoctor",
    "NoSuchPatient",
    "Doctor",
    "Patient",
    "PersonInfo",
]
