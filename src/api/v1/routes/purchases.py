"""Purchase API routes for buyers."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import BuyerSession
from api.v1.dependencies import get_purchase_service
from api.v1.schemas.purchase import (
    PurchaseCreate,
    PurchaseDetailResponse,
    PurchaseListResponse,
    PurchaseResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import GeoPoint
from domain.services.purchase_service import PurchaseRequest, PurchaseService
from infrastructure.payments.gateway import PaymentCard

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post(
    "",
    response_model=PurchaseDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Buy cylinders",
    responses={
        201: {"description": "Payment accepted and purchase recorded"},
        402: {"description": "Payment failed"},
        404: {"description": "Seller not found"},
        409: {"description": "Seller unavailable or stock changed"},
        422: {"description": "Invalid quantity or card details"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_purchase(
    request: Request,
    body: PurchaseCreate,
    session: BuyerSession,
    service: PurchaseService = Depends(get_purchase_service),
) -> PurchaseDetailResponse:
    """
    Charge the card, then decrement the seller's stock and record the purchase
    in one transaction.

    If `delivery_address` differs from the address on file, the buyer's
    profile address is updated in the same transaction.
    """
    location = body.buyer_location
    purchase = await service.purchase(
        session,
        PurchaseRequest(
            seller_id=body.seller_id,
            quantity=body.quantity,
            card=PaymentCard(
                card_number=body.card_number,
                expiration_date=body.expiration_date,
                cvv=body.cvv,
            ),
            delivery_address=body.delivery_address,
            buyer_location=(
                GeoPoint(latitude=location.latitude, longitude=location.longitude)
                if location
                else None
            ),
        ),
    )
    return PurchaseDetailResponse(data=PurchaseResponse.model_validate(purchase))


@router.get("/mine", response_model=PurchaseListResponse, summary="List my purchases")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_purchases(
    request: Request,
    session: BuyerSession,
    service: PurchaseService = Depends(get_purchase_service),
) -> PurchaseListResponse:
    """The caller's purchases, newest first."""
    purchases = await service.list_purchases(session)
    return PurchaseListResponse(
        data=[PurchaseResponse.model_validate(p) for p in purchases],
        meta={"total": len(purchases)},
    )
