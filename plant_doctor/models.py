from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _scalar_to_str(value: Any) -> Any:
    """null becomes "" and numbers/booleans their text; other types are left to validation."""
    if value is None:
        return ""
    if isinstance(value, (bool, int, float)):
        return str(value)
    return value


class DiagnosisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plant_name: str = Field("Unknown Plant", alias="plantName")
    scientific_name: Optional[str] = Field(None, alias="scientificName")
    disease: Optional[str] = None
    disease_description: Optional[str] = Field(None, alias="diseaseDescription")
    description: str  # raw model answer, verbatim


class PlantDetailsInfo(BaseModel):
    """The eleven descriptive attributes of an identified plant."""

    model_config = ConfigDict(populate_by_name=True)

    family: str = ""
    native_region: str = Field("", alias="nativeRegion")
    growth_habit: str = Field("", alias="growthHabit")
    flower_color: str = Field("", alias="flowerColor")
    leaf_type: str = Field("", alias="leafType")
    soil_type: str = Field("", alias="soilType")
    water_needs: str = Field("", alias="waterNeeds")
    sunlight_requirements: str = Field("", alias="sunlightRequirements")
    temperature_tolerance: str = Field("", alias="temperatureTolerance")
    uses: str = ""
    toxicity: str = ""

    @field_validator(
        "family", "native_region", "growth_habit", "flower_color", "leaf_type",
        "soil_type", "water_needs", "sunlight_requirements",
        "temperature_tolerance", "uses", "toxicity",
        mode="before",
    )
    @classmethod
    def coerce_scalars(cls, value):
        return _scalar_to_str(value)


class PlantDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    scientific_name: str = Field("", alias="scientificName")
    description: str = ""
    details: PlantDetailsInfo = Field(default_factory=PlantDetailsInfo)

    @field_validator("name", "scientific_name", "description", mode="before")
    @classmethod
    def coerce_scalars(cls, value):
        return _scalar_to_str(value)


# Labels shown in the identification results table, in display order
DETAIL_LABELS = {
    "family": "Family",
    "native_region": "Native Region",
    "growth_habit": "Growth Habit",
    "flower_color": "Flower Color",
    "leaf_type": "Leaf Type",
    "soil_type": "Soil Type",
    "water_needs": "Water Needs",
    "sunlight_requirements": "Sunlight Requirements",
    "temperature_tolerance": "Temperature Tolerance",
    "uses": "Uses",
    "toxicity": "Toxicity",
}


class PageState(BaseModel):
    """What an analysis page is currently showing.

    ``idle`` is the upload form, ``result`` carries the parsed record for the
    submitted image, ``error`` carries a message for the user.
    """

    phase: Literal["idle", "result", "error"] = "idle"
    image: Optional[str] = None  # data URL used for the preview
    result: Optional[Union[PlantDetails, DiagnosisResult]] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_phase(self):
        if self.phase == "result" and self.result is None:
            raise ValueError("result phase requires a result")
        if self.phase == "error" and not self.error:
            raise ValueError("error phase requires an error message")
        return self

    @classmethod
    def idle(cls) -> "PageState":
        return cls()

    @classmethod
    def show_result(cls, result, image: Optional[str] = None) -> "PageState":
        return cls(phase="result", result=result, image=image)

    @classmethod
    def show_error(cls, message: str, image: Optional[str] = None) -> "PageState":
        return cls(phase="error", error=message, image=image)
