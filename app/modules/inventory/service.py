# app/modules/inventory/service.py
import logging
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.database.models import Product
from .repository import InventoryRepository
from .schemas import ProductCreateRequest, ProductUpdateRequest, ProductListResponse, ProductResponse

logger = logging.getLogger(__name__)

class InventoryService:
    """
    Gestión del catálogo limitada a los campos de precio y stock
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = InventoryRepository(db)

    async def list_products(self, search: Optional[str] = None) -> ProductListResponse:
        products = self.repository.list_products(search)
        return ProductListResponse(
            success=True,
            products=[ProductResponse.model_validate(p) for p in products],
            count=len(products)
        )

    async def get_product(self, product_id: int) -> Product:
        product = self.repository.get_product_by_id(product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
        return product

    async def create_product(self, product_data: ProductCreateRequest) -> Product:
        self._ensure_unique_sku(product_data.sku)
        product = self.repository.create_product(product_data.model_dump())
        logger.info(f"Producto {product.id} creado (sku={product.sku})")
        return product

    async def update_product(self, product_id: int, product_data: ProductUpdateRequest) -> Product:
        product = await self.get_product(product_id)
        self._ensure_unique_sku(product_data.sku, exclude_id=product.id)
        return self.repository.update_product(product, product_data.model_dump())

    def _ensure_unique_sku(self, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not sku:
            return
        existing = self.repository.get_product_by_sku(sku)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"field": "sku", "message": f"El SKU '{sku}' ya está registrado"}
            )
