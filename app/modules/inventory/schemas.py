from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

# ==================== CLASE BASE PARA RESPUESTAS ====================

class InventoryBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del producto")
    description: Optional[str] = Field(None, description="Descripción")
    sku: Optional[str] = Field(None, max_length=100, description="Código único (opcional)")
    # purchase_price es el nombre antiguo del campo de costo
    cost_price: Decimal = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("cost_price", "purchase_price"),
        description="Precio de costo en USD"
    )
    selling_price: Decimal = Field(..., ge=0, description="Precio de venta en USD")
    stock: int = Field(..., ge=0, description="Unidades disponibles")

    @field_validator('sku')
    @classmethod
    def normalize_sku(cls, v: Optional[str]):
        if v is None:
            return None
        v = v.strip()
        return v or None

class ProductUpdateRequest(ProductCreateRequest):
    pass

# ==================== RESPONSE SCHEMAS ====================

class ProductResponse(InventoryBaseModel):
    id: int
    name: str
    description: Optional[str]
    sku: Optional[str]
    cost_price: Decimal
    selling_price: Decimal
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ProductListResponse(InventoryBaseModel):
    success: bool
    products: List[ProductResponse]
    count: int
