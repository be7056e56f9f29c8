from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class WalkingSpeed(str, Enum):
    """Rider-selectable walking speed preset"""
    SLOW = "slow"      # elderly, mobility impaired
    NORMAL = "normal"  # average walking
    FAST = "fast"      # brisk walking


class ConfidenceLevel(str, Enum):
    """Rider-facing transfer confidence tier"""
    LIKELY = "likely"      # >= 3 minutes buffer
    RISKY = "risky"        # 1-3 minutes buffer
    UNLIKELY = "unlikely"  # < 1 minute buffer


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Stop(GeoPoint):
    id: str
    name: str


class TransferEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    walking_distance_meters: int = Field(ge=0)
    walking_time_seconds: int = Field(ge=30)  # never below the platform buffer


class TransferResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_stop: Stop
    to_stop: Stop
    walking_time_seconds: int
    walking_distance_meters: int
    buffer_seconds: int  # negative when the walk alone exceeds the time available
    confidence: ConfidenceLevel


class Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    stop_id: Optional[str] = None
    route_id: Optional[str] = None
    direction_id: Optional[int] = None
    arrival_time: Optional[datetime] = None
    departure_time: Optional[datetime] = None
    status: Optional[str] = None

    @property
    def best_time(self) -> Optional[datetime]:
        """Departure time when known, otherwise arrival time."""
        return self.departure_time or self.arrival_time


class ConfidenceBadge(BaseModel):
    level: ConfidenceLevel
    label: str   # "Likely" | "Risky" | "Unlikely"
    color: str   # "green" | "amber" | "red"
    hex: str
    icon: str


class EvaluateTransferRequest(BaseModel):
    from_stop: Stop
    to_stop: Stop
    walking_speed: WalkingSpeed = WalkingSpeed.NORMAL
    available_time_seconds: int


class LiveTransferRequest(BaseModel):
    from_stop_id: str
    to_stop_id: str
    route_id: Optional[str] = None  # connecting route at the destination stop
    walking_speed: WalkingSpeed = WalkingSpeed.NORMAL


class SimulateDelayRequest(BaseModel):
    original_buffer_seconds: int
    delay_seconds: int = 0


class TransferResponse(BaseModel):
    result: TransferResult
    feasible: bool
    walking_time_text: str
    walking_distance_text: str
    buffer_label: str
    buffer_text: str
    badge: ConfidenceBadge
    explanation: str
    prediction: Optional[Prediction] = None


class DelaySimulationResponse(BaseModel):
    confidence: ConfidenceLevel
    new_buffer_seconds: int
    badge: ConfidenceBadge
    explanation: str


class WalkingSpeedOption(BaseModel):
    speed: WalkingSpeed
    meters_per_second: float
    description: str


class WalkingSpeedsResponse(BaseModel):
    options: List[WalkingSpeedOption]
