from typing import List

from fastapi import APIRouter, Depends

from domain import DeliveryTier
from schemas import DeliveryEstimateRequest, DeliveryEstimateResponse
from services.delivery_fees import estimate_delivery

from .dependencies import get_delivery_tiers

router = APIRouter(prefix="/api/estimate", tags=["estimate"])


@router.post("/delivery", response_model=DeliveryEstimateResponse)
async def estimate_delivery_fee(
    payload: DeliveryEstimateRequest,
    tiers: List[DeliveryTier] = Depends(get_delivery_tiers),
) -> DeliveryEstimateResponse:
    return DeliveryEstimateResponse(**estimate_delivery(payload.distanceKm, tiers))
