from fastapi import APIRouter, Depends

from app.dependencies import get_product_service
from app.schemas.common import ApiListResponse, ApiResponse, MessageResponse
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ApiListResponse[ProductRead])
async def list_products(
    category: str | None = None,
    featured: str | None = None,
    sort: str | None = None,
    limit: str | None = None,
    service: ProductService = Depends(get_product_service),
):
    # Raw strings; ProductFilter does the parsing so errors stay typed
    params = {"category": category, "featured": featured, "sort": sort, "limit": limit}
    products = await service.list({k: v for k, v in params.items() if v is not None})
    return ApiListResponse[ProductRead](
        count=len(products),
        data=[ProductRead.model_validate(p) for p in products]
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    product = await service.get(product_id)
    return ApiResponse[ProductRead](data=ProductRead.model_validate(product))


@router.post("", status_code=201, response_model=ApiResponse[ProductRead])
async def create_product(request: ProductCreate, service: ProductService = Depends(get_product_service)):
    product = await service.create(request)
    return ApiResponse[ProductRead](data=ProductRead.model_validate(product))


@router.put("/{product_id}", response_model=ApiResponse[ProductRead])
async def update_product(
    product_id: str,
    request: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    product = await service.update(product_id, request)
    return ApiResponse[ProductRead](data=ProductRead.model_validate(product))


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    await service.delete(product_id)
    return MessageResponse(message="Product deleted successfully")
