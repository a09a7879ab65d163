from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

Probability = Literal["High", "Moderate", "Low"]

DEFAULT_PROBABILITY: Probability = "Moderate"


class ReportSection(NamedTuple):
    field: str
    header: str


# Header literals shared by the prompt renderer and the section extractor.
# Order is the order the model is asked to answer in.
REPORT_SECTIONS: tuple[ReportSection, ...] = (
    ReportSection("clinical_assessment", "CLINICAL ASSESSMENT"),
    ReportSection("differential_diagnosis", "DIFFERENTIAL DIAGNOSIS"),
    ReportSection("recommended_investigations", "RECOMMENDED INVESTIGATIONS"),
    ReportSection("treatment_plan", "TREATMENT PLAN"),
    ReportSection("patient_counseling", "PATIENT COUNSELING POINTS"),
    ReportSection("red_flags", "RED FLAGS"),
)


class DiagnosisEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    diagnosis: str
    probability: Probability = DEFAULT_PROBABILITY
    # Declared for storage compatibility; extraction does not fill these.
    supporting_features: tuple[str, ...] = ()
    investigations_needed: tuple[str, ...] = ()


class RecommendedInvestigations(BaseModel):
    model_config = ConfigDict(frozen=True)

    essential: tuple[str, ...] = ()
    additional: tuple[str, ...] = ()


class TreatmentPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    immediate_management: str = ""
    pharmacological: tuple[str, ...] = ()
    non_pharmacological: tuple[str, ...] = ()
    monitoring: tuple[str, ...] = ()


class ClinicalReport(BaseModel):
    """Typed view of a model response. Built once per analysis, never edited."""

    model_config = ConfigDict(frozen=True)

    clinical_assessment: str = ""
    differential_diagnosis: tuple[DiagnosisEntry, ...] = ()
    recommended_investigations: RecommendedInvestigations = Field(
        default_factory=RecommendedInvestigations
    )
    treatment_plan: TreatmentPlan = Field(default_factory=TreatmentPlan)
    patient_counseling: tuple[str, ...] = ()
    red_flags: tuple[str, ...] = ()
    raw_text: str = ""

    def missing_sections(self) -> list[str]:
        """Headers of the sections that came back empty, in report order."""
        investigations = self.recommended_investigations
        plan = self.treatment_plan
        present = {
            "clinical_assessment": bool(self.clinical_assessment),
            "differential_diagnosis": bool(self.differential_diagnosis),
            "recommended_investigations": bool(
                investigations.essential or investigations.additional
            ),
            "treatment_plan": bool(
                plan.immediate_management
                or plan.pharmacological
                or plan.non_pharmacological
                or plan.monitoring
            ),
            "patient_counseling": bool(self.patient_counseling),
            "red_flags": bool(self.red_flags),
        }
        return [section.header for section in REPORT_SECTIONS if not present[section.field]]


class AnalysisResult(BaseModel):
    success: bool
    data: ClinicalReport | None = None
    error: str | None = None
