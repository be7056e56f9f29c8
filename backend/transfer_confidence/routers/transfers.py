import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..config import Config
from ..models import (
    DelaySimulationResponse,
    EvaluateTransferRequest,
    LiveTransferRequest,
    Prediction,
    SimulateDelayRequest,
    TransferResponse,
    TransferResult,
    WalkingSpeed,
    WalkingSpeedOption,
    WalkingSpeedsResponse,
)
from ..services import confidence, formatting, geo
from ..services.mbta import MBTAAPIError, MBTAClient, seconds_until

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transfers", tags=["transfers"])


@lru_cache(maxsize=1)
def get_mbta_client() -> MBTAClient:
    if not Config.MBTA_API_KEY:
        logger.warning("MBTA_API_KEY not set - requests are limited to 20 per minute")
    return MBTAClient(Config.MBTA_API_KEY)


def build_transfer_response(
    result: TransferResult,
    available_time_seconds: int,
    prediction: Optional[Prediction] = None
) -> TransferResponse:
    buffer_label, buffer_text = formatting.format_buffer(result.buffer_seconds)
    return TransferResponse(
        result=result,
        feasible=confidence.is_feasible(result.walking_time_seconds, available_time_seconds),
        walking_time_text=formatting.format_walking_time(result.walking_time_seconds),
        walking_distance_text=formatting.format_distance(result.walking_distance_meters),
        buffer_label=buffer_label,
        buffer_text=buffer_text,
        badge=formatting.confidence_badge(result.confidence),
        explanation=confidence.explain(result.confidence),
        prediction=prediction,
    )


@router.post("/evaluate", response_model=TransferResponse)
async def evaluate_transfer(req: EvaluateTransferRequest):
    result = confidence.evaluate_transfer(
        req.from_stop,
        req.to_stop,
        req.walking_speed,
        req.available_time_seconds
    )
    return build_transfer_response(result, req.available_time_seconds)


@router.post("/simulate-delay", response_model=DelaySimulationResponse)
async def simulate_delay(req: SimulateDelayRequest):
    simulation = confidence.simulate_delay(req.original_buffer_seconds, req.delay_seconds)
    return DelaySimulationResponse(
        confidence=simulation.confidence,
        new_buffer_seconds=simulation.new_buffer_seconds,
        badge=formatting.confidence_badge(simulation.confidence),
        explanation=confidence.explain(simulation.confidence),
    )


@router.post("/live", response_model=TransferResponse)
async def evaluate_live_transfer(
    req: LiveTransferRequest,
    client: MBTAClient = Depends(get_mbta_client)
):
    """
    Evaluate a transfer against the next real-time prediction at the
    destination stop.
    """
    try:
        from_stop = await client.get_stop(req.from_stop_id)
        to_stop = await client.get_stop(req.to_stop_id)
        prediction = await client.get_next_prediction(req.to_stop_id, req.route_id)
    except MBTAAPIError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Stop not found")
        logger.error("Live transfer lookup failed: %s", e)
        raise HTTPException(status_code=503, detail="Transit data unavailable")

    if prediction is None:
        raise HTTPException(status_code=404, detail="No upcoming prediction")

    available_time = seconds_until(prediction.best_time)
    result = confidence.evaluate_transfer(from_stop, to_stop, req.walking_speed, available_time)
    return build_transfer_response(result, available_time, prediction)


@router.get("/walking-speeds", response_model=WalkingSpeedsResponse)
async def list_walking_speeds():
    return WalkingSpeedsResponse(
        options=[
            WalkingSpeedOption(
                speed=speed,
                meters_per_second=geo.WALKING_SPEEDS[speed],
                description=geo.SPEED_DESCRIPTIONS[speed],
            )
            for speed in WalkingSpeed
        ]
    )
