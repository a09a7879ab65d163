"""Tests for Pydantic models - case input and clinical report schemas."""

import pytest
from pydantic import ValidationError

from medcase.models.case import CaseDescription, ClinicalData, ExaminationFindings, PatientInfo, Vitals
from medcase.models.report import (
    REPORT_SECTIONS,
    AnalysisResult,
    ClinicalReport,
    DiagnosisEntry,
    RecommendedInvestigations,
    TreatmentPlan,
)

# --- Case input ---


class TestPatientInfo:
    def test_valid(self):
        p = PatientInfo(age=45, gender="Male", patient_id="PT-1")
        assert p.age == 45
        assert p.gender == "Male"

    @pytest.mark.parametrize("age", [-1, 151])
    def test_age_out_of_range(self, age):
        with pytest.raises(ValidationError):
            PatientInfo(age=age, gender="Female", patient_id="PT-1")

    def test_age_bounds_inclusive(self):
        assert PatientInfo(age=0, gender="Other", patient_id="a").age == 0
        assert PatientInfo(age=150, gender="Other", patient_id="b").age == 150

    def test_unknown_gender_rejected(self):
        with pytest.raises(ValidationError):
            PatientInfo(age=30, gender="Unknown", patient_id="PT-1")


class TestClinicalData:
    def test_required_fields(self):
        with pytest.raises(ValidationError):
            ClinicalData(chief_complaint="Cough")

    def test_defaults(self):
        c = ClinicalData(chief_complaint="Cough", history_of_presenting_illness="3 days")
        assert c.past_medical_history is None
        assert c.current_medications == []
        assert c.allergies == []
        assert isinstance(c.examination_findings, ExaminationFindings)
        assert c.examination_findings.vitals is None

    def test_vitals_default_not_recorded(self):
        v = Vitals()
        assert v.temperature is None
        assert v.oxygen_saturation is None


class TestCaseDescription:
    def test_from_json(self):
        case = CaseDescription.model_validate_json(
            '{"patient_info": {"age": 30, "gender": "Female", "patient_id": "X"},'
            ' "clinical_data": {"chief_complaint": "Headache",'
            ' "history_of_presenting_illness": "Since morning",'
            ' "examination_findings": {"vitals": {"heart_rate": "90"}}}}'
        )
        assert case.clinical_data.examination_findings.vitals.heart_rate == "90"


# --- Report ---


class TestDiagnosisEntry:
    def test_probability_defaults_to_moderate(self):
        entry = DiagnosisEntry(diagnosis="Migraine")
        assert entry.probability == "Moderate"
        assert entry.supporting_features == ()
        assert entry.investigations_needed == ()

    def test_rejects_unknown_probability(self):
        with pytest.raises(ValidationError):
            DiagnosisEntry(diagnosis="Migraine", probability="Not specified")


class TestClinicalReport:
    def test_defaults(self):
        r = ClinicalReport()
        assert r.clinical_assessment == ""
        assert r.differential_diagnosis == ()
        assert r.recommended_investigations == RecommendedInvestigations()
        assert r.treatment_plan == TreatmentPlan()
        assert r.patient_counseling == ()
        assert r.red_flags == ()
        assert r.raw_text == ""

    def test_frozen(self):
        r = ClinicalReport(clinical_assessment="Stable")
        with pytest.raises(ValidationError):
            r.clinical_assessment = "Edited"

    def test_sequences_cannot_be_mutated(self):
        r = ClinicalReport(red_flags=["Syncope"], treatment_plan=TreatmentPlan(monitoring=["Daily weights"]))
        assert isinstance(r.red_flags, tuple)
        with pytest.raises(AttributeError):
            r.red_flags.append("Chest pain")
        with pytest.raises(AttributeError):
            r.treatment_plan.monitoring.append("Hourly obs")
        assert r.red_flags == ("Syncope",)

    def test_missing_sections_all_when_empty(self):
        assert ClinicalReport().missing_sections() == [s.header for s in REPORT_SECTIONS]

    def test_missing_sections_partial(self):
        r = ClinicalReport(
            clinical_assessment="Stable",
            treatment_plan=TreatmentPlan(monitoring=["Daily weights"]),
            red_flags=["Chest pain"],
        )
        assert r.missing_sections() == [
            "DIFFERENTIAL DIAGNOSIS",
            "RECOMMENDED INVESTIGATIONS",
            "PATIENT COUNSELING POINTS",
        ]

    def test_serialization_roundtrip(self):
        r = ClinicalReport(
            differential_diagnosis=[DiagnosisEntry(diagnosis="Gout", probability="High")],
            raw_text="raw",
        )
        restored = ClinicalReport.model_validate_json(r.model_dump_json())
        assert restored == r


class TestAnalysisResult:
    def test_failure(self):
        result = AnalysisResult(success=False, error="quota exceeded")
        assert result.data is None
        assert result.error == "quota exceeded"

    def test_success(self):
        result = AnalysisResult(success=True, data=ClinicalReport(raw_text="x"))
        assert result.data.raw_text == "x"
        assert result.error is None
