from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.auth import require_admin
from app.core.lifecycle import AppServices, get_services
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.product_type import ProductTypeCreate, ProductTypeResponse, ProductTypeUpdate
from app.services.product_type_service import ProductTypeService

router = APIRouter(
    prefix="/product-types",
    tags=["Product Types"],
    dependencies=[Depends(require_admin)],
)


def get_product_type_service(services: AppServices = Depends(get_services)) -> ProductTypeService:
    return ProductTypeService(services.product_types, services.products, services.cache)


@router.get("", response_model=ApiResponse[list[ProductTypeResponse]])
async def list_product_types(
    service: ProductTypeService = Depends(get_product_type_service),
) -> ApiResponse[list[ProductTypeResponse]]:
    return ApiResponse(data=service.list())


@router.post(
    "",
    response_model=ApiResponse[ProductTypeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product_type(
    payload: ProductTypeCreate,
    service: ProductTypeService = Depends(get_product_type_service),
) -> ApiResponse[ProductTypeResponse]:
    return ApiResponse(data=service.create(payload))


@router.get("/{product_type_id}", response_model=ApiResponse[ProductTypeResponse])
async def get_product_type(
    product_type_id: int,
    service: ProductTypeService = Depends(get_product_type_service),
) -> ApiResponse[ProductTypeResponse]:
    return ApiResponse(data=service.get(product_type_id))


@router.put("/{product_type_id}", response_model=ApiResponse[ProductTypeResponse])
async def update_product_type(
    product_type_id: int,
    payload: ProductTypeUpdate,
    service: ProductTypeService = Depends(get_product_type_service),
) -> ApiResponse[ProductTypeResponse]:
    return ApiResponse(data=service.update(product_type_id, payload))


@router.delete("/{product_type_id}", response_model=ApiResponse[MessageResponse])
async def delete_product_type(
    product_type_id: int,
    service: ProductTypeService = Depends(get_product_type_service),
) -> ApiResponse[MessageResponse]:
    service.delete(product_type_id)
    return ApiResponse(data=MessageResponse(message="Product type deleted successfully"))
