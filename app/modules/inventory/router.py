# app/modules/inventory/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from .service import InventoryService
from .schemas import ProductCreateRequest, ProductUpdateRequest, ProductResponse, ProductListResponse

router = APIRouter(prefix="/inventory", tags=["Inventory"])

@router.get("", response_model=ProductListResponse)
async def list_products(
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Listar productos, opcionalmente filtrando por nombre o SKU"""
    service = InventoryService(db)
    return await service.list_products(search)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: Session = Depends(get_db)):
    service = InventoryService(db)
    return await service.get_product(product_id)

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear producto

    - SKU opcional, único cuando se envía
    - Precios en USD con 6 decimales
    """
    service = InventoryService(db)
    return await service.create_product(product_data)

@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdateRequest,
    db: Session = Depends(get_db)
):
    service = InventoryService(db)
    return await service.update_product(product_id, product_data)
