from pydantic import BaseModel, Field
from typing import Literal, Optional


class OutcomeIn(BaseModel):
    result: Literal["alpha", "omega"]


class RegionIn(BaseModel):
    x: float = Field(ge=0)
    y: float = Field(ge=0)
    width: float
    height: float


class MonitorStartIn(BaseModel):
    region: RegionIn
    sensitivity: Optional[int] = None


class SensitivityIn(BaseModel):
    value: int


class EntryOut(BaseModel):
    id: int
    result: str
    observed_at: str


class MethodOut(BaseModel):
    name: str
    strategy: str
    accuracy: float
    predictions: int
    correct: int


class BestOut(BaseModel):
    name: str
    accuracy: float
    prediction: Optional[str]


class AddOut(BaseModel):
    accepted: bool
    entry: Optional[EntryOut] = None
    state: dict


class DetectionOut(BaseModel):
    result: str
    at: str
    accepted: bool


class MonitorOut(BaseModel):
    active: bool
    sensitivity: int
    interval_ms: int
    region: Optional[RegionIn] = None
    started_at: Optional[str] = None
    ticks: int = 0
    last_detected: Optional[DetectionOut] = None


class TickOut(BaseModel):
    detected: Optional[str]
    monitor: MonitorOut
