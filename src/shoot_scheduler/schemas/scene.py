from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shoot_scheduler.services.units import ProductionUnit


class SceneCardIn(BaseModel):
    """A scene card as the scene editor stores it.

    Fields are accepted as sent; the scheduling engine normalizes them and
    substitutes defaults for anything missing or malformed.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Any = None
    scene_number: Any = Field(default=None, alias="sceneNumber")
    title: Any = None
    estimated_duration: Any = Field(default=None, alias="estimatedDuration")
    estimated_duration_minutes: Any = Field(default=None, alias="estimatedDurationMinutes")
    time_of_day: Any = Field(default=None, alias="timeOfDay")
    keywords: Any = None
    weights: Any = None
    user_id: Any = Field(default=None, alias="userId")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class KeywordsRead(BaseModel):
    location: str
    date: str
    equipment: str
    cast: list[str]
    props: list[str]
    special_requirements: list[str]


class UnitWeightsRead(BaseModel):
    location_priority: int
    equipment_priority: int
    cast_priority: int
    time_priority: int
    complexity: int


class ProductionUnitRead(BaseModel):
    id: str
    scene_number: int
    title: str
    estimated_duration_minutes: int
    time_of_day: str
    keywords: KeywordsRead
    weights: UnitWeightsRead
    user_id: str = ""

    @classmethod
    def from_unit(cls, unit: ProductionUnit) -> "ProductionUnitRead":
        keywords = unit.keywords
        weights = unit.weights
        return cls(
            id=unit.id,
            scene_number=unit.scene_number,
            title=unit.title,
            estimated_duration_minutes=unit.estimated_duration_minutes,
            time_of_day=unit.time_of_day.value,
            keywords=KeywordsRead(
                location=keywords.location,
                date=keywords.date,
                equipment=keywords.equipment,
                cast=list(keywords.cast),
                props=list(keywords.props),
                special_requirements=list(keywords.special_requirements),
            ),
            weights=UnitWeightsRead(
                location_priority=weights.location_priority,
                equipment_priority=weights.equipment_priority,
                cast_priority=weights.cast_priority,
                time_priority=weights.time_priority,
                complexity=weights.complexity,
            ),
            user_id=unit.user_id,
        )
