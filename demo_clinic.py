"""
End-to-end demo of the clinic registry.

This script:
1. Loads sample patients and doctors from the text format
2. Reports rejected lines through a listener
3. Assigns patients and renders every report

Run with: uv run python demo_clinic.py [data-file]
"""

import io
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from clinic.domain.exceptions import ClinicError
from clinic.services.registry import Clinic

console = Console()

SAMPLE_DATA = """\
P;Giovanni;Rossi;THEPAT12H00A000A
P ; Mario ; Bianchi ; THEPAT00A00H001B
P;Anna;Verdi;THEPAT34C00B002C
P;Luca;Neri;THEPAT56D00C003D
M;14;Maria;Bianchi;THEDOC12F00A005F;Cardiology
M;86;Sandro;Fontana;THEDOC34G00B006G;Neurology
M;33;Carla;Esposito;THEDOC56H00C007H;Cardiology
X;not;a;record

M;notanumber
"""

ASSIGNMENTS = [
    ("THEPAT12H00A000A", 14),
    ("THEPAT00A00H001B", 14),
    ("THEPAT34C00B002C", 14),
    ("THEPAT56D00C003D", 33),
]


def load(clinic: Clinic, source: io.TextIOBase) -> int:
    """Load records, printing each rejected line."""
    rejected = Table(title="Rejected Lines")
    rejected.add_column("Line", style="cyan", justify="right")
    rejected.add_column("Content", style="red")

    processed = clinic.load_data(source, lambda n, line: rejected.add_row(str(n), repr(line)))

    console.print(f"Loaded {processed} records", style="green")
    if rejected.row_count:
        console.print(rejected)
    return processed


def show_registry(clinic: Clinic) -> None:
    table = Table(title="Doctors")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Doctor", style="magenta")
    table.add_column("Patients", style="green")

    for doctor in clinic.doctors():
        patients = ", ".join(clinic.get_assigned_patients(doctor.id)) or "-"
        table.add_row(str(doctor.id), clinic.get_doctor(doctor.id), patients)

    console.print(table)


def show_reports(clinic: Clinic) -> None:
    console.print(Panel("Reports", style="blue"))
    console.print(f"Idle doctors: {clinic.idle_doctors()}")
    console.print(f"Busy doctors: {clinic.busy_doctors()}")

    for title, lines in (
        ("Doctors by number of patients", clinic.doctors_by_num_patients()),
        ("Patients per specialization", clinic.count_patients_per_specialization()),
    ):
        table = Table(title=title)
        table.add_column("Entry", style="white")
        for line in lines:
            table.add_row(line)
        console.print(table)


def main(argv: list[str]) -> int:
    console.print(Panel("Clinic Registry Demo", style="bold blue"))
    clinic = Clinic()

    try:
        if len(argv) > 1:
            with open(argv[1], encoding="utf-8") as source:
                load(clinic, source)
        else:
            load(clinic, io.StringIO(SAMPLE_DATA))

        for ssn, doctor_id in ASSIGNMENTS:
            clinic.assign_patient_to_doctor(ssn, doctor_id)
    except (ClinicError, OSError) as e:
        console.print(f"Demo failed: {e}", style="red")
        return 1

    show_registry(clinic)
    show_reports(clinic)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
