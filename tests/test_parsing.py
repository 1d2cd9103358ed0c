"""
Tests for parsing the model's answers
Diagnosis: best-effort label scraping, never fails
Identification: JSON span extraction + strict decode
"""
import pytest

from plant_doctor.models import PlantDetails
from plant_doctor.services.parsing import (
    ParseError,
    extract_json,
    parse_diagnosis,
    parse_plant_details,
)


# =============================================================================
# Diagnosis parser
# =============================================================================
class TestParseDiagnosis:
    @pytest.mark.parametrize("text", [
        "",
        "no recognizable structure here",
        "Plant Name: Ficus.\nScientific Name: Ficus benjamina.\n",
        "Disease Description: spots\n\n  trailing whitespace  ",
    ])
    def test_description_is_raw_text(self, text):
        assert parse_diagnosis(text).description == text

    def test_name_and_scientific_name(self):
        result = parse_diagnosis("Plant Name: Ficus.\nScientific Name: Ficus benjamina.\n")
        assert result.plant_name == "Ficus"
        assert result.scientific_name == "Ficus benjamina"

    def test_no_structure_keeps_defaults(self):
        text = "no recognizable structure here"
        result = parse_diagnosis(text)
        assert result.plant_name == "Unknown Plant"
        assert result.scientific_name is None
        assert result.disease is None
        assert result.disease_description is None
        assert result.description == text

    def test_empty_input(self):
        result = parse_diagnosis("")
        assert result.plant_name == "Unknown Plant"
        assert result.description == ""

    @pytest.mark.parametrize("text", [
        "PLANT NAME: Oak.",
        "plant name: Oak.",
        "Plant name: Oak\n",
    ])
    def test_labels_are_case_insensitive(self, text):
        assert parse_diagnosis(text).plant_name == "Oak"

    def test_disease_description_keeps_periods(self):
        text = "Disease Description: Leaf spot caused by fungus. Treat with fungicide.\n"
        result = parse_diagnosis(text)
        assert result.disease_description == "Leaf spot caused by fungus. Treat with fungicide."
        # "Disease Description:" is not a "Disease:" label
        assert result.disease is None

    def test_disease_description_runs_to_end_of_text(self):
        result = parse_diagnosis("Detailed Disease Description: Rust pustules on leaf undersides")
        assert result.disease_description == "Rust pustules on leaf undersides"

    @pytest.mark.parametrize("text, expected", [
        ("Potential Diseases: Powdery mildew.\n", "Powdery mildew"),
        ("Diseases: None detected\n", "None detected"),
        ("Disease: Black spot. Remove fallen leaves.", "Black spot"),
    ])
    def test_disease_labels(self, text, expected):
        assert parse_diagnosis(text).disease == expected

    def test_latin_name_label(self):
        assert parse_diagnosis("Latin Name: Rosa rubiginosa\n").scientific_name == "Rosa rubiginosa"

    def test_first_match_wins(self):
        result = parse_diagnosis("Plant Name: Rose.\nPlant Name: Tulip.\n")
        assert result.plant_name == "Rose"

    def test_name_label_also_matches_inside_scientific_name(self):
        """'Name:' anywhere counts, so a leading scientific name line is taken as the plant name"""
        result = parse_diagnosis("Scientific Name: Ficus benjamina.\nPlant Name: Ficus.\n")
        assert result.plant_name == "Ficus benjamina"
        assert result.scientific_name == "Ficus benjamina"

    def test_empty_capture_is_still_a_match(self):
        result = parse_diagnosis("Plant Name:  .")
        assert result.plant_name == ""

    def test_full_report(self):
        text = (
            "1) Plant Name: Tomato.\n"
            "2) Scientific Name: Solanum lycopersicum.\n"
            "3) Potential Diseases: Early blight.\n"
            "4) Disease Description: Concentric brown rings on older leaves. Spreads in humid weather.\n"
            "5) Brief Plant Overview: A warm-season fruiting crop.\n"
        )
        result = parse_diagnosis(text)
        assert result.plant_name == "Tomato"
        assert result.scientific_name == "Solanum lycopersicum"
        assert result.disease == "Early blight"
        assert result.disease_description == (
            "Concentric brown rings on older leaves. Spreads in humid weather."
        )
        assert result.description == text

    def test_serializes_with_camel_case_keys(self):
        data = parse_diagnosis("Plant Name: Fern.").model_dump(by_alias=True, exclude_none=True)
        assert data == {"plantName": "Fern", "description": "Plant Name: Fern."}


# =============================================================================
# JSON extraction
# =============================================================================
class TestExtractJson:
    @pytest.mark.parametrize("text", [
        "",
        "no json here",
        "closing only }",
        "{ never closed",
        "} backwards {",
    ])
    def test_no_json_found(self, text):
        with pytest.raises(ParseError, match="No valid JSON found"):
            extract_json(text)

    def test_strips_surrounding_prose(self):
        assert extract_json('prefix {"name":"Rose"} suffix') == '{"name":"Rose"}'

    def test_strips_code_fence(self):
        text = '```json\n{"name": "Rose", "details": {"family": "Rosaceae"}}\n```'
        assert extract_json(text) == '{"name": "Rose", "details": {"family": "Rosaceae"}}'

    def test_span_is_first_open_to_last_close(self):
        # No brace matching: unrelated braces in prose widen the span
        text = 'Here {is} the answer: {"name": "Rose"}'
        assert extract_json(text) == '{is} the answer: {"name": "Rose"}'


# =============================================================================
# Plant details
# =============================================================================
FULL_ANSWER = """Sure! {
  "name": "Swiss Cheese Plant",
  "scientificName": "Monstera deliciosa",
  "description": "A climbing evergreen with split leaves.",
  "details": {
    "family": "Araceae",
    "nativeRegion": "Southern Mexico to Panama",
    "growthHabit": "Climbing vine",
    "flowerColor": "Cream",
    "leafType": "Large, fenestrated",
    "soilType": "Well-draining peat mix",
    "waterNeeds": "Moderate",
    "sunlightRequirements": "Bright indirect light",
    "temperatureTolerance": "18-30 C",
    "uses": "Ornamental houseplant",
    "toxicity": "Toxic to cats and dogs"
  }
}"""


class TestParsePlantDetails:
    def test_full_answer(self):
        plant = parse_plant_details(FULL_ANSWER)
        assert isinstance(plant, PlantDetails)
        assert plant.name == "Swiss Cheese Plant"
        assert plant.scientific_name == "Monstera deliciosa"
        assert plant.details.family == "Araceae"
        assert plant.details.native_region == "Southern Mexico to Panama"
        assert plant.details.sunlight_requirements == "Bright indirect light"
        assert plant.details.toxicity == "Toxic to cats and dogs"

    def test_round_trips_to_camel_case(self):
        data = parse_plant_details(FULL_ANSWER).model_dump(by_alias=True)
        assert data["scientificName"] == "Monstera deliciosa"
        assert set(data["details"]) == {
            "family", "nativeRegion", "growthHabit", "flowerColor", "leafType",
            "soilType", "waterNeeds", "sunlightRequirements",
            "temperatureTolerance", "uses", "toxicity",
        }

    def test_missing_and_extra_keys_are_tolerated(self):
        plant = parse_plant_details('{"name": "Rose", "confidence": 0.9, "details": {"family": "Rosaceae"}}')
        assert plant.name == "Rose"
        assert plant.scientific_name == ""
        assert plant.details.family == "Rosaceae"
        assert plant.details.uses == ""

    def test_null_attribute_reads_as_empty(self):
        plant = parse_plant_details('{"name": "Fern", "description": null, "details": {"flowerColor": null}}')
        assert plant.name == "Fern"
        assert plant.description == ""
        assert plant.details.flower_color == ""

    @pytest.mark.parametrize("value, expected", [
        ("30", "30"),
        ("-2.5", "-2.5"),
        ("true", "True"),
    ])
    def test_scalar_attribute_is_kept_as_text(self, value, expected):
        plant = parse_plant_details('{"name": "Fern", "details": {"temperatureTolerance": %s}}' % value)
        assert plant.details.temperature_tolerance == expected

    def test_numeric_top_level_field(self):
        assert parse_plant_details('{"name": 42}').name == "42"

    @pytest.mark.parametrize("details", ['"unknown"', "null", "[1, 2]"])
    def test_details_must_be_an_object(self, details):
        with pytest.raises(ParseError, match="details"):
            parse_plant_details('{"name": "Rose", "details": %s}' % details)

    def test_malformed_json(self):
        with pytest.raises(ParseError, match="Invalid JSON"):
            parse_plant_details('{"name": "Rose",}')

    def test_no_json(self):
        with pytest.raises(ParseError, match="No valid JSON found"):
            parse_plant_details("I could not identify this plant.")
