from fastapi import APIRouter, Depends

from app.dependencies import get_order_service
from app.schemas.common import ApiListResponse, ApiResponse
from app.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from app.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=ApiListResponse[OrderRead])
async def list_orders(service: OrderService = Depends(get_order_service)):
    orders = await service.list()
    return ApiListResponse[OrderRead](count=len(orders), data=orders)


@router.get("/{order_id}", response_model=ApiResponse[OrderRead])
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return ApiResponse[OrderRead](data=await service.get(order_id))


@router.post("", status_code=201, response_model=ApiResponse[OrderRead])
async def create_order(request: OrderCreate, service: OrderService = Depends(get_order_service)):
    order = await service.create(request)
    return ApiResponse[OrderRead](data=OrderRead.model_validate(order))


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderRead])
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    order = await service.update_status(order_id, request)
    return ApiResponse[OrderRead](data=OrderRead.model_validate(order))
