import logging

from medcase.config import ANALYSIS_MAX_TOKENS
from medcase.models.case import CaseDescription
from medcase.models.report import AnalysisResult
from medcase.services.llm import get_llm_client
from medcase.services.prompt_renderer import render
from medcase.services.section_extractor import extract

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a clinical decision support system assisting qualified physicians
with case review, differential diagnosis, treatment planning and patient counseling.
You support clinical decision-making; you do not replace physician judgment.

For each case:
- Review the presenting complaint, history and examination findings systematically.
- Point out missing information that matters for the diagnosis.
- Rank the differential diagnosis and suggest investigations that confirm or exclude each one.
- Recommend evidence-based treatment, taking age, comorbidities, allergies and current
  medications into account, with monitoring and follow-up.
- Give patient-friendly counseling points and the warning signs that need urgent care.

Output format (use these bold headers exactly, in this order):

**CLINICAL ASSESSMENT**
[Summary of the presentation and key findings]

**DIFFERENTIAL DIAGNOSIS**
1. [Most likely diagnosis] - Probability: [High/Moderate/Low]
   - Supporting features: ...
   - Investigations needed: ...
2. [Next possibility] - Probability: [High/Moderate/Low]

**RECOMMENDED INVESTIGATIONS**
- Essential: [list]
- Consider if: [conditions]

**TREATMENT PLAN**
- Immediate management: ...
- Pharmacological: ...
- Non-pharmacological: ...
- Monitoring: ...

**PATIENT COUNSELING POINTS**
- [Key points for patient education]

**RED FLAGS / WHEN TO SEEK IMMEDIATE CARE**
- [Warning signs]

Safety:
- Defer to the treating physician's assessment and local protocols.
- Say when specialist review or emergency care is needed.
- Recommend verifying drug doses and interactions against current references.
- Acknowledge uncertainty and note when evidence is limited."""


async def analyze_case(case: CaseDescription, tier: str | None = None) -> AnalysisResult:
    """Render a case, ask the model for an assessment and extract the report.

    Model-call failures come back as an unsuccessful result with the error
    message; extraction is only run on a reply that actually arrived.
    """
    prompt = render(case)
    patient_id = case.patient_info.patient_id

    try:
        raw = await get_llm_client().generate_text(
            system=SYSTEM_PROMPT,
            user=prompt,
            max_tokens=ANALYSIS_MAX_TOKENS,
            tier=tier,
        )
    except Exception as e:
        logger.error("Case analysis failed for patient %s: %s", patient_id, e)
        return AnalysisResult(success=False, error=str(e))

    report = extract(raw)
    logger.info(
        "Analyzed case for patient %s: %d differential diagnosis entries",
        patient_id,
        len(report.differential_diagnosis),
    )
    return AnalysisResult(success=True, data=report)
