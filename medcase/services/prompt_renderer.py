from medcase.models.case import CaseDescription, ExaminationFindings
from medcase.models.report import REPORT_SECTIONS
from medcase.services.text_cleanup import is_present, join_present

INTRO = "Please analyze the following patient case:"

_VITAL_LABELS = (
    ("temperature", "Temperature"),
    ("blood_pressure", "Blood Pressure"),
    ("heart_rate", "Heart Rate"),
    ("respiratory_rate", "Respiratory Rate"),
    ("oxygen_saturation", "Oxygen Saturation"),
)


def _section(header: str, body: str) -> str:
    return f"## {header}\n{body}\n\n"


def instruction_line() -> str:
    """Closing request naming the report headers in the order they are parsed."""
    headers = ", ".join(f"**{section.header}**" for section in REPORT_SECTIONS)
    return (
        "Please provide a comprehensive clinical assessment using these "
        f"section headers, in this order: {headers}."
    )


def _render_examination(findings: ExaminationFindings) -> str:
    parts: list[str] = []

    if findings.vitals is not None:
        vitals_lines = [
            f"- {label}: {getattr(findings.vitals, name)}\n"
            for name, label in _VITAL_LABELS
            if is_present(getattr(findings.vitals, name))
        ]
        if vitals_lines:
            parts.append("### Vitals:\n" + "".join(vitals_lines) + "\n")

    if is_present(findings.general_examination):
        parts.append(f"### General Examination:\n{findings.general_examination}\n\n")

    if is_present(findings.systemic_examination):
        parts.append(f"### Systemic Examination:\n{findings.systemic_examination}\n\n")

    if not parts:
        return ""
    return "## EXAMINATION FINDINGS\n" + "".join(parts)


def render(case: CaseDescription) -> str:
    """Serialize a case into the prompt sent to the model.

    Optional sections are emitted only when they carry data, so a case with
    only the required fields renders patient information, chief complaint,
    history of presenting illness and the closing instruction.
    """
    patient = case.patient_info
    clinical = case.clinical_data

    prompt = f"{INTRO}\n\n"
    prompt += (
        "## PATIENT INFORMATION\n"
        f"- Age: {patient.age} years\n"
        f"- Gender: {patient.gender}\n"
        f"- Patient ID: {patient.patient_id}\n\n"
    )

    prompt += _section("CHIEF COMPLAINT", clinical.chief_complaint)
    prompt += _section("HISTORY OF PRESENTING ILLNESS", clinical.history_of_presenting_illness)

    if is_present(clinical.past_medical_history):
        prompt += _section("PAST MEDICAL HISTORY", clinical.past_medical_history)
    if is_present(clinical.past_surgical_history):
        prompt += _section("PAST SURGICAL HISTORY", clinical.past_surgical_history)

    medications = join_present(clinical.current_medications)
    if medications:
        prompt += _section("CURRENT MEDICATIONS", medications)
    allergies = join_present(clinical.allergies)
    if allergies:
        prompt += _section("ALLERGIES", allergies)

    if is_present(clinical.family_history):
        prompt += _section("FAMILY HISTORY", clinical.family_history)
    if is_present(clinical.social_history):
        prompt += _section("SOCIAL HISTORY", clinical.social_history)

    prompt += _render_examination(clinical.examination_findings)

    if is_present(clinical.investigation_results):
        prompt += _section("INVESTIGATION RESULTS", clinical.investigation_results)

    prompt += f"\n{instruction_line()}"
    return prompt
