"""
Parsing of the model's answers.

Two strategies, one per prompt:
- Diagnosis answers are free prose, so fields are scraped by label and a
  missing label simply leaves the field unset. ``parse_diagnosis`` never fails.
- Identification answers are asked to be a JSON object, so the object is cut
  out of the text and decoded strictly. Any failure raises ``ParseError``.
"""
import json
import logging
import re

from pydantic import ValidationError

from plant_doctor.models import DiagnosisResult, PlantDetails

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """The model's answer could not be turned into a result record."""


# =============================================================================
# Diagnosis (free text)
# =============================================================================
# Short fields stop at the first newline or period
_PLANT_NAME_RE = re.compile(r'(?:Plant Name|Name):\s*(.+?)[\n.]', re.IGNORECASE)
_SCIENTIFIC_NAME_RE = re.compile(r'(?:Scientific Name|Latin Name):\s*(.+?)[\n.]', re.IGNORECASE)
_DISEASE_RE = re.compile(r'(?:Potential Diseases|Diseases?):\s*(.+?)[\n.]', re.IGNORECASE)
# Descriptions keep their sentence punctuation: only a newline or the end stops them
_DISEASE_DESCRIPTION_RE = re.compile(
    r'(?:Disease Description|Detailed Disease Description):\s*(.+?)(?:\n|$)',
    re.IGNORECASE,
)


def parse_diagnosis(text: str) -> DiagnosisResult:
    """Scrape a diagnosis answer into a ``DiagnosisResult``.

    Each label group is searched on its own; the first match wins and an
    empty capture still counts as found. ``description`` is always the
    untouched input.
    """
    result = DiagnosisResult(description=text)

    match = _PLANT_NAME_RE.search(text)
    if match:
        result.plant_name = match.group(1).strip()

    match = _SCIENTIFIC_NAME_RE.search(text)
    if match:
        result.scientific_name = match.group(1).strip()

    match = _DISEASE_RE.search(text)
    if match:
        result.disease = match.group(1).strip()

    match = _DISEASE_DESCRIPTION_RE.search(text)
    if match:
        result.disease_description = match.group(1).strip()

    return result


# =============================================================================
# Identification (structured JSON)
# =============================================================================
def extract_json(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` inclusive."""
    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx < start_idx:
        raise ParseError("No valid JSON found in response")
    return text[start_idx:end_idx + 1]


def parse_plant_details(text: str) -> PlantDetails:
    json_str = extract_json(text)
    logger.debug(f"Extracted JSON string (first 200 chars): {json_str[:200]}...")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in response: {e.msg}") from e

    try:
        return PlantDetails.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ParseError(f"Unexpected plant details format ({fields})") from e
