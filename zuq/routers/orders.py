"""Order progress and batch registration endpoints."""

from fastapi import APIRouter, HTTPException, status

from zuq.dependencies import Repos
from zuq.schemas.order import OrderBatchCreate, OrderBatchResponse, OrderProgressResponse
from zuq.services import order_service
from zuq.services.auth import RequireAuth

router = APIRouter()


def _not_found(e: order_service.OrderNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{order_id}/progress", response_model=OrderProgressResponse)
async def get_progress(order_id: str, current_user: RequireAuth, repos: Repos) -> OrderProgressResponse:
    """Ordered, received and remaining quantities of an order."""
    try:
        progress = await order_service.get_order_progress(repos, order_id)
    except order_service.OrderNotFoundError as e:
        raise _not_found(e)
    return OrderProgressResponse(**progress)


@router.get("/{order_id}/batches", response_model=list[OrderBatchResponse])
async def list_batches(order_id: str, current_user: RequireAuth, repos: Repos) -> list[OrderBatchResponse]:
    try:
        batches = await order_service.list_batches(repos, order_id)
    except order_service.OrderNotFoundError as e:
        raise _not_found(e)
    return [OrderBatchResponse(**batch) for batch in batches]


@router.post(
    "/{order_id}/batches",
    response_model=OrderBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_batch(
    order_id: str,
    batch: OrderBatchCreate,
    current_user: RequireAuth,
    repos: Repos,
) -> OrderBatchResponse:
    """Register a partial receipt; the order status follows the received total."""
    data = batch.model_dump()
    for key in ("received_date", "shipping_date"):
        if data[key] is not None:
            data[key] = data[key].isoformat()

    try:
        created = await order_service.register_batch(repos, order_id, data)
    except order_service.OrderNotFoundError as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return OrderBatchResponse(**created)
