"""
Typed entities for the Fitbit Web API payloads consumed by the ingestion services.

Field names follow Python conventions; the camelCase aliases match the JSON the
API returns and the shape persisted inside documents.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FitbitEntity(BaseModel):
    """Base model mapping snake_case attributes to camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Unit(FitbitEntity):
    id: int = 0
    name: str = ""
    plural: str = ""


class LoggedFood(FitbitEntity):
    access_level: str = ""
    amount: float = 0
    brand: str = ""
    calories: int = 0
    food_id: int = 0
    locale: str = ""
    meal_type_id: int = 0
    name: str = ""
    unit: Unit = Field(default_factory=Unit)
    units: List[int] = Field(default_factory=list)


class NutritionalValues(FitbitEntity):
    calories: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    protein: float = 0
    sodium: float = 0


class Food(FitbitEntity):
    is_favorite: bool = False
    log_date: str = ""
    log_id: int = 0
    logged_food: LoggedFood = Field(default_factory=LoggedFood)
    nutritional_values: NutritionalValues = Field(default_factory=NutritionalValues)


class Goals(FitbitEntity):
    calories: float = 0
    estimated_calories_out: Optional[float] = None


class FoodSummary(FitbitEntity):
    calories: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    protein: float = 0
    sodium: float = 0
    water: float = 0


class FoodResponse(FitbitEntity):
    """Body of ``GET /1/user/-/foods/log/date/{date}.json``."""

    foods: List[Food] = Field(default_factory=list)
    goals: Goals = Field(default_factory=Goals)
    summary: FoodSummary = Field(default_factory=FoodSummary)


class SleepLevelData(FitbitEntity):
    date_time: str = ""
    level: str = ""
    seconds: int = 0


class SleepLevelSummary(FitbitEntity):
    count: int = 0
    minutes: int = 0
    thirty_day_avg_minutes: Optional[int] = None


class SleepLevels(FitbitEntity):
    data: List[SleepLevelData] = Field(default_factory=list)
    short_data: List[SleepLevelData] = Field(default_factory=list)
    summary: Dict[str, SleepLevelSummary] = Field(default_factory=dict)


class Sleep(FitbitEntity):
    date_of_sleep: str = ""
    duration: int = 0
    efficiency: int = 0
    end_time: str = ""
    info_code: int = 0
    is_main_sleep: bool = False
    levels: SleepLevels = Field(default_factory=SleepLevels)
    log_id: int = 0
    log_type: str = ""
    minutes_after_wakeup: int = 0
    minutes_asleep: int = 0
    minutes_awake: int = 0
    minutes_to_fall_asleep: int = 0
    start_time: str = ""
    time_in_bed: int = 0
    type: str = ""


class SleepStages(FitbitEntity):
    deep: int = 0
    light: int = 0
    rem: int = 0
    wake: int = 0


class SleepSummary(FitbitEntity):
    stages: Optional[SleepStages] = None
    total_minutes_asleep: int = 0
    total_sleep_records: int = 0
    total_time_in_bed: int = 0


class SleepResponse(FitbitEntity):
    """Body of ``GET /1.2/user/-/sleep/date/{date}.json``."""

    sleep: List[Sleep] = Field(default_factory=list)
    summary: SleepSummary = Field(default_factory=SleepSummary)


__all__ = [
    "Food",
    "FoodResponse",
    "FoodSummary",
    "Goals",
    "LoggedFood",
    "NutritionalValues",
    "Sleep",
    "SleepLevelData",
    "SleepLevelSummary",
    "SleepLevels",
    "SleepResponse",
    "SleepStages",
    "SleepSummary",
    "Unit",
]
