"""Parse a free-text model response into a ClinicalReport.

The response is prose with markdown-ish headers whose wording, emphasis and
order vary between calls. Every section is located independently: first as a
bold header (``**TREATMENT PLAN**``), then as a plain header line
(``TREATMENT PLAN:``). A section body runs until the next located header or
the next standalone upper-case bold heading, whichever comes first.

Nothing here raises on malformed input. A section that cannot be found or
parsed keeps its empty default so the caller can see what is missing.
"""

import logging
import re
from typing import Callable

from medcase.models.report import (
    DEFAULT_PROBABILITY,
    ClinicalReport,
    DiagnosisEntry,
    RecommendedInvestigations,
    TreatmentPlan,
)
from medcase.services.text_cleanup import clean_lines, normalize_newlines

logger = logging.getLogger(__name__)

_LINE_START = r"^[ \t]*(?:#{1,6}[ \t]*)?"

HEADER_PATTERNS = {
    "clinical_assessment": r"CLINICAL[ \t]+ASSESSMENT",
    "differential_diagnosis": r"DIFFERENTIAL[ \t]+DIAGNOS[EI]S",
    "recommended_investigations": r"RECOMMENDED[ \t]+INVESTIGATIONS?",
    "treatment_plan": r"TREATMENT[ \t]+PLAN",
    "patient_counseling": r"PATIENT[ \t]+COUNSELL?ING(?:[ \t]+POINTS?)?",
    "red_flags": r"RED[ \t]+FLAGS?",
}


def _primary_re(name: str) -> re.Pattern:
    # **NAME**, **NAME:**, **NAME / suffix**, optionally followed by a colon
    return re.compile(
        _LINE_START + r"\*\*[ \t]*(?:" + name + r")\b[^*\n]*\*\*[ \t]*:?",
        re.IGNORECASE | re.MULTILINE,
    )


def _fallback_re(name: str) -> re.Pattern:
    # NAME:, NAME / suffix:, or NAME alone on its line
    return re.compile(
        _LINE_START + r"(?:" + name + r")\b(?:[ \t]*/[^\n:]*)?(?:[ \t]*:|[ \t]*$)",
        re.IGNORECASE | re.MULTILINE,
    )


_SECTION_RES = {
    field: (_primary_re(name), _fallback_re(name)) for field, name in HEADER_PATTERNS.items()
}

# Any other standalone upper-case bold heading ends the section before it,
# unless it is a numbered list item or a sub-label such as **PHARMACOLOGICAL:**.
_BOLD_HEADING_RE = re.compile(
    _LINE_START + r"\*\*(?P<title>(?![ \t]*\d+\.)(?=[^*\n]*[A-Z])[^a-z*\n]+)\*\*[ \t]*:?[ \t]*$",
    re.MULTILINE,
)


def locate_sections(text: str) -> dict[str, str]:
    """Map each section found in ``text`` to its body text."""
    headers: dict[str, re.Match] = {}
    for field, (primary, fallback) in _SECTION_RES.items():
        match = primary.search(text)
        if match is None:
            match = fallback.search(text)
            if match is not None:
                logger.debug("Section %s located without bold header", field)
        if match is not None:
            headers[field] = match

    anchors = sorted(
        {m.start() for m in headers.values()}
        | {
            m.start()
            for m in _BOLD_HEADING_RE.finditer(text)
            if not _is_sublabel(m.group("title"))
        }
    )

    bodies = {}
    for field, match in headers.items():
        end = next((pos for pos in anchors if pos >= match.end()), len(text))
        bodies[field] = text[match.end():end]
    return bodies


# --- Differential diagnosis ---

_NUMBERED = r"^\s*(?:#{1,6}\s*)?\**\s*\d+\.\s+(?P<dx>.+?)"
_LEVEL = r"(?P<level>High|Moderate|Low)\b"

DiagnosisMatcher = Callable[[str], DiagnosisEntry | None]


def _line_matcher(pattern: str) -> DiagnosisMatcher:
    regex = re.compile(pattern, re.IGNORECASE)

    def match_line(line: str) -> DiagnosisEntry | None:
        match = regex.match(line)
        if match is None:
            return None
        diagnosis = match.group("dx").replace("**", "").strip()
        if not diagnosis:
            return None
        level = match.groupdict().get("level")
        probability = level.capitalize() if level else DEFAULT_PROBABILITY
        return DiagnosisEntry(diagnosis=diagnosis, probability=probability)

    return match_line


# Most structured first. The first matcher that recovers anything wins.
DIAGNOSIS_MATCHERS: tuple[DiagnosisMatcher, ...] = (
    # 1. Pneumonia - Probability: High
    _line_matcher(_NUMBERED + r"\s*[-–—]\s*\**\s*Probability\s*:?\s*\**\s*" + _LEVEL),
    # 1. Pneumonia - High probability
    _line_matcher(_NUMBERED + r"\s*[-–—]\s*\**\s*" + _LEVEL + r"\**\s+probability\b"),
    # 1. Pneumonia
    _line_matcher(_NUMBERED + r"\s*$"),
)


def parse_differential(body: str) -> list[DiagnosisEntry]:
    lines = body.split("\n")
    for matcher in DIAGNOSIS_MATCHERS:
        entries = [entry for entry in map(matcher, lines) if entry is not None]
        if entries:
            return entries
    return []


# --- Labelled sub-blocks ---

def _label(pattern: str) -> str:
    # A label ends the line or is followed by a colon (bold markers allowed).
    return pattern + r"(?=[ \t*]*(?::|$))"


_SUBLABEL_TEMPLATE = (
    r"^[ \t]*(?:[-•*][ \t]*)?(?:\*\*)?[ \t]*(?:{label})(?:[ \t]*\*\*)?[ \t]*:?[ \t]*(?:\*\*)?"
)

INVESTIGATION_LABELS = {
    "essential": _label(r"Essential(?:[ \t]+investigations?)?"),
    "additional": (
        _label(r"Additional(?:[ \t]+investigations?)?")
        + r"|Consider[ \t]+if\b|"
        + _label(r"Consider")
    ),
}

TREATMENT_LABELS = {
    "immediate_management": _label(r"Immediate[ \t]+management"),
    "pharmacological": _label(r"Pharmacological(?:[ \t]+(?:management|treatment|therapy))?"),
    "non_pharmacological": _label(
        r"Non[- \t]?pharmacological(?:[ \t]+(?:management|treatment|therapy|measures))?"
    ),
    "monitoring": _label(r"Monitoring(?:[ \t]+(?:and|&)[ \t]+follow[- \t]?up)?"),
}

_SUBLABEL_RE = re.compile(
    "|".join(f"(?:{label})" for label in (*INVESTIGATION_LABELS.values(), *TREATMENT_LABELS.values())),
    re.IGNORECASE | re.MULTILINE,
)


def _is_sublabel(title: str) -> bool:
    return _SUBLABEL_RE.match(title.strip().rstrip(":").strip()) is not None


def slice_labels(body: str, labels: dict[str, str]) -> dict[str, str]:
    """Split ``body`` on the first occurrence of each sub-label."""
    found = []
    for key, label in labels.items():
        match = re.search(
            _SUBLABEL_TEMPLATE.format(label=label), body, re.IGNORECASE | re.MULTILINE
        )
        if match is not None:
            found.append((match.start(), match.end(), key))
    found.sort()

    blocks = {}
    for index, (_, end, key) in enumerate(found):
        stop = found[index + 1][0] if index + 1 < len(found) else len(body)
        blocks[key] = body[end:stop]
    return blocks


def parse_investigations(body: str) -> RecommendedInvestigations:
    blocks = slice_labels(body, INVESTIGATION_LABELS)
    return RecommendedInvestigations(
        essential=clean_lines(blocks.get("essential", "")),
        additional=clean_lines(blocks.get("additional", "")),
    )


def parse_treatment(body: str) -> TreatmentPlan:
    blocks = slice_labels(body, TREATMENT_LABELS)
    return TreatmentPlan(
        immediate_management=blocks.get("immediate_management", "").strip(),
        pharmacological=clean_lines(blocks.get("pharmacological", "")),
        non_pharmacological=clean_lines(blocks.get("non_pharmacological", "")),
        monitoring=clean_lines(blocks.get("monitoring", "")),
    )


_SECTION_PARSERS: dict[str, Callable[[str], object]] = {
    "clinical_assessment": str.strip,
    "differential_diagnosis": parse_differential,
    "recommended_investigations": parse_investigations,
    "treatment_plan": parse_treatment,
    "patient_counseling": clean_lines,
    "red_flags": clean_lines,
}


def extract(raw_text: str) -> ClinicalReport:
    """Build a ClinicalReport from a raw model response. Never raises."""
    raw_text = raw_text or ""
    bodies = locate_sections(normalize_newlines(raw_text))

    fields = {}
    for field, parser in _SECTION_PARSERS.items():
        body = bodies.get(field)
        if body is None:
            continue
        try:
            fields[field] = parser(body)
        except Exception as e:
            logger.error("Failed to parse %s section: %s", field, e)

    report = ClinicalReport(raw_text=raw_text, **fields)
    missing = report.missing_sections()
    if missing:
        logger.info("Extracted report is missing %d section(s): %s", len(missing), ", ".join(missing))
    return report
