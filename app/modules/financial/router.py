# app/modules/financial/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from .service import FinancialService
from .schemas import RateUpdateRequest, RateUpdateResponse, RatesResponse, FinancialSummaryResponse, DebtorsResponse

router = APIRouter(tags=["Financial"])

# ==================== TASAS DE CAMBIO ====================

@router.get("/exchange-rates", response_model=RatesResponse)
async def list_exchange_rates(db: Session = Depends(get_db)):
    service = FinancialService(db)
    return await service.list_rates()

@router.post("/exchange-rates", response_model=RateUpdateResponse)
async def update_exchange_rates(
    rate_data: RateUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Actualizar tasas de cambio

    Con freeze_cop_prices=true y un cambio en la tasa COP, todos los
    precios de venta en USD se multiplican por tasa_anterior / tasa_nueva
    para que el precio en pesos no cambie. El costo no se ajusta.
    """
    service = FinancialService(db)
    return await service.update_rates(rate_data)

# ==================== REPORTES ====================

@router.get("/financial", response_model=FinancialSummaryResponse)
async def get_financial_summary(db: Session = Depends(get_db)):
    """Totales históricos y del día, abonos y deuda pendiente"""
    service = FinancialService(db)
    return await service.get_summary()

@router.get("/financial/debtors", response_model=DebtorsResponse)
async def get_debtors(db: Session = Depends(get_db)):
    service = FinancialService(db)
    return await service.get_debtors()
