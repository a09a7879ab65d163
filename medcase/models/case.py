from typing import Literal

from pydantic import BaseModel, Field


class PatientInfo(BaseModel):
    age: int = Field(..., ge=0, le=150)
    gender: Literal["Male", "Female", "Other"]
    patient_id: str


class Vitals(BaseModel):
    """Free-text vitals as recorded at the bedside. None means not recorded."""

    temperature: str | None = None
    blood_pressure: str | None = None
    heart_rate: str | None = None
    respiratory_rate: str | None = None
    oxygen_saturation: str | None = None


class ExaminationFindings(BaseModel):
    vitals: Vitals | None = None
    general_examination: str | None = None
    systemic_examination: str | None = None


class ClinicalData(BaseModel):
    chief_complaint: str
    history_of_presenting_illness: str
    past_medical_history: str | None = None
    past_surgical_history: str | None = None
    current_medications: list[str] = []
    allergies: list[str] = []
    family_history: str | None = None
    social_history: str | None = None
    examination_findings: ExaminationFindings = Field(default_factory=ExaminationFindings)
    investigation_results: str | None = None


class CaseDescription(BaseModel):
    """Structured case as submitted by the intake form."""

    patient_info: PatientInfo
    clinical_data: ClinicalData
