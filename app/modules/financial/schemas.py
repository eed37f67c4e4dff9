from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import List, Optional, Dict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

RATE_QUANTUM = Decimal("0.0001")

class FinancialBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== TASAS ====================

class RateEntry(BaseModel):
    currency_code: str = Field(..., min_length=1, max_length=10, description="Código de moneda (COP, VES)")
    rate: Decimal = Field(..., ge=0, description="Unidades de la moneda por 1 USD")

    @field_validator('currency_code')
    @classmethod
    def normalize_code(cls, v: str):
        v = v.strip().upper()
        if not v:
            raise ValueError('El código de moneda no puede estar vacío')
        return v

    @field_validator('rate')
    @classmethod
    def quantize_rate(cls, v: Decimal):
        # Misma escala que exchange_rates.rate, para comparar con lo guardado
        return v.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)

class RateUpdateRequest(BaseModel):
    rates: List[RateEntry] = Field(..., min_length=1)
    freeze_cop_prices: bool = Field(False, description="Reajustar precios USD para mantener el precio en COP")

    @model_validator(mode='after')
    def unique_codes(self):
        codes = [entry.currency_code for entry in self.rates]
        duplicated = sorted({c for c in codes if codes.count(c) > 1})
        if duplicated:
            raise ValueError(f"Monedas repetidas: {', '.join(duplicated)}")
        return self

class PriceAdjustment(FinancialBaseModel):
    old_cop_rate: Decimal
    new_cop_rate: Decimal
    adjustment_factor: Decimal
    products_updated: int
    margin_before: Decimal
    margin_after: Decimal
    margin_delta: Decimal

class RateUpdateResponse(FinancialBaseModel):
    success: bool
    message: str
    rates: Dict[str, Decimal]
    prices_adjusted: bool
    adjustment: Optional[PriceAdjustment] = None

class RatesResponse(FinancialBaseModel):
    success: bool
    rates: Dict[str, Decimal]

# ==================== RESUMEN Y DEUDORES ====================

class FinancialSummary(FinancialBaseModel):
    total_usd: Decimal
    total_cop: Decimal
    total_ves: Decimal
    total_sales: int
    today_sales: int
    today_total_usd: Decimal
    today_total_cop: Decimal
    today_total_ves: Decimal
    total_paid_cop: Decimal
    total_paid_usd: Decimal
    total_debt_cop: Decimal
    total_debt_usd: Decimal
    net_worth_cop: Decimal

class FinancialSummaryResponse(FinancialBaseModel):
    success: bool
    summary: FinancialSummary
    exchange_rates: Dict[str, Decimal]

class DebtorInfo(FinancialBaseModel):
    customer_id: int
    customer_name: str
    total_debt_cop: Decimal
    total_debt_usd: Decimal
    sale_count: int

class DebtorsResponse(FinancialBaseModel):
    success: bool
    debtors: List[DebtorInfo]
    count: int
    total_debt_cop: Decimal
    total_debt_usd: Decimal
