from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import List, Optional, Dict, Any
from datetime import datetime
from decimal import Decimal

from app.shared.database.models import SaleStatus
from app.shared.services.currency_service import Currency, STORAGE_PLACES, fits_storage

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(BaseModel):
    product_id: int = Field(..., description="ID del producto")
    quantity: int = Field(..., ge=1, description="Cantidad")

class SaleCreateRequest(BaseModel):
    customer_id: Optional[int] = Field(None, description="Cliente (vacío = Cliente Eventual)")
    items: List[SaleItemRequest] = Field(..., min_length=1, description="Items de la venta")

    # Totales calculados por el POS con las tasas vigentes
    total_usd: Decimal = Field(..., ge=0)
    total_cop: Decimal = Field(..., ge=0)
    total_ves: Decimal = Field(..., ge=0)

    # Si no se envían, la venta se considera pagada completa
    paid_amount_usd: Optional[Decimal] = Field(None, ge=0)
    paid_amount_cop: Optional[Decimal] = Field(None, ge=0)
    paid_amount_ves: Optional[Decimal] = Field(None, ge=0)

    exchange_rate_ves: Decimal = Field(..., description="Tasa VES al momento de la venta")
    exchange_rate_cop: Decimal = Field(..., description="Tasa COP al momento de la venta")

    status: Optional[SaleStatus] = Field(None, description="completed | pending")

    @model_validator(mode='after')
    def fill_paid_amounts(self):
        if self.paid_amount_usd is None:
            self.paid_amount_usd = self.total_usd
        if self.paid_amount_cop is None:
            self.paid_amount_cop = self.total_cop
        if self.paid_amount_ves is None:
            self.paid_amount_ves = self.total_ves
        if self.status is None:
            self.status = SaleStatus.completed
        return self

class PaymentRequest(BaseModel):
    amount: Decimal = Field(..., ge=Decimal("0.01"), description="Monto del abono")
    currency: Currency = Field(..., description="COP | USD | VES")

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode='after')
    def amount_fits_currency(self):
        # La columna de cada moneda tiene escala fija
        if not fits_storage(self.amount, self.currency):
            places = STORAGE_PLACES[self.currency]
            raise ValueError(
                f"El abono en {self.currency.value} admite como máximo {places} decimales"
            )
        return self

# ==================== RESPONSE SCHEMAS ====================

class SaleItemResponse(SalesBaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price_usd: Decimal
    subtotal_usd: Decimal

class SaleResponse(SalesBaseModel):
    id: int
    customer_id: Optional[int]
    customer_name: str
    total_usd: Decimal
    total_cop: Decimal
    total_ves: Decimal
    paid_amount_usd: Decimal
    paid_amount_cop: Decimal
    paid_amount_ves: Decimal
    exchange_rate_ves: Decimal
    exchange_rate_cop: Decimal
    status: SaleStatus
    created_at: Optional[datetime]

    items: List[SaleItemResponse]

    # Saldo pendiente por moneda (nunca negativo)
    balance: Dict[str, Decimal]
    display: Dict[str, Any]

class CheckoutResponse(SalesBaseModel):
    success: bool
    message: str
    sale: SaleResponse

class PaymentResponse(SalesBaseModel):
    success: bool
    message: str
    settled: bool
    sale: SaleResponse

class SaleListResponse(SalesBaseModel):
    success: bool
    sales: List[SaleResponse]
    count: int
