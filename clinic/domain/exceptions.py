class ClinicError(Exception):
    """Base class for registry errors."""


class NoSuchPatient(ClinicError):
    def __init__(self, ssn: str):
        self.ssn = ssn
        super().__init__(f"No patient found with ssn: {ssn}")


class NoSuchDoctor(ClinicError):
    """Raised for an unknown doctor ID, or when a patient has no assigned doctor."""

    def __init__(self, doctor_id: int | None = None, *, ssn: str | None = None):
        self.doctor_id = doctor_id
        self.ssn = ssn
        if doctor_id is not None:
            message = f"No doctor found with id: {doctor_id}"
        elif ssn is not None:
            message = f"No doctor assigned for patient: {ssn}"
        else:
            message = "No doctor found"
        super().__init__(message)


class MalformedLine(ClinicError):
    """A data line that does not match the patient or doctor record layout."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")


class InvalidDoctorId(MalformedLine, ValueError):
    """A doctor line whose ID field is not an integer."""

    def __init__(self, line: str, value: str, line_number: int | None = None):
        self.value = value
        self.line_number = line_number
        super().__init__(line, f"invalid doctor id {value!r}")
