import os

import pytest

# No external API keys for tests
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["LLM_PROVIDER"] = "auto"

from medcase.models.case import CaseDescription


SAMPLE_RESPONSE = """**CLINICAL ASSESSMENT**
45-year-old male with 3 days of productive cough, fever and right-sided pleuritic chest pain.
Febrile and tachypnoeic with focal crackles at the right base.

**DIFFERENTIAL DIAGNOSIS**
1. Community-acquired pneumonia - Probability: High
   - Supporting features: fever, focal crackles
   - Investigations needed: chest X-ray
2. Acute bronchitis - Probability: Moderate
3. Pulmonary embolism - Probability: Low

**RECOMMENDED INVESTIGATIONS**
- Essential:
  - Chest X-ray
  - Full blood count
- Consider if:
  - CT pulmonary angiogram if D-dimer raised

**TREATMENT PLAN**
- Immediate management: Oxygen to keep saturations above 94%
- Pharmacological:
  - Amoxicillin 500mg three times daily for 5 days
  - Paracetamol 1g four times daily
- Non-pharmacological:
  - Rest and oral fluids
- Monitoring:
  - Repeat observations in 48 hours

**PATIENT COUNSELING POINTS**
- Complete the full antibiotic course
- Stop smoking

**RED FLAGS / WHEN TO SEEK IMMEDIATE CARE**
- Worsening breathlessness
- Confusion
"""


@pytest.fixture
def sample_response() -> str:
    return SAMPLE_RESPONSE


@pytest.fixture
def minimal_case() -> CaseDescription:
    """Case with only the required fields."""
    return CaseDescription.model_validate(
        {
            "patient_info": {"age": 45, "gender": "Male", "patient_id": "PT-0042"},
            "clinical_data": {
                "chief_complaint": "Productive cough for three days",
                "history_of_presenting_illness": "Fever and right-sided pleuritic chest pain since Monday",
            },
        }
    )


@pytest.fixture
def full_case() -> CaseDescription:
    return CaseDescription.model_validate(
        {
            "patient_info": {"age": 62, "gender": "Female", "patient_id": "PT-0107"},
            "clinical_data": {
                "chief_complaint": "Chest tightness on exertion",
                "history_of_presenting_illness": "Two weeks of exertional chest tightness relieved by rest",
                "past_medical_history": "Type 2 diabetes, hypertension",
                "past_surgical_history": "Cholecystectomy 2015",
                "current_medications": ["Metformin 500mg BD", "Ramipril 5mg OD"],
                "allergies": ["Penicillin"],
                "family_history": "Father had MI at 58",
                "social_history": "Ex-smoker, 20 pack years",
                "examination_findings": {
                    "vitals": {
                        "temperature": "36.8C",
                        "blood_pressure": "150/92 mmHg",
                        "heart_rate": "88 bpm",
                    },
                    "general_examination": "Comfortable at rest",
                    "systemic_examination": "Heart sounds normal, chest clear",
                },
                "investigation_results": "ECG: sinus rhythm, no acute changes",
            },
        }
    )
