# app/modules/sales/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.shared.database.models import SaleStatus
from .service import SalesService
from .schemas import (
    SaleCreateRequest, PaymentRequest, SaleResponse,
    CheckoutResponse, PaymentResponse, SaleListResponse
)

router = APIRouter(tags=["Sales - POS"])

# ==================== CHECKOUT ====================

@router.post("/sales", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_data: SaleCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar venta desde el POS

    Incluye:
    - Totales en USD, COP y VES calculados por el POS
    - Abonos iniciales (si no se envían, la venta se considera pagada)
    - Bloqueo de productos y descuento de stock en una sola transacción
    - Precio de cada línea tomado del producto al momento de la venta
    """
    service = SalesService(db)
    return await service.checkout_response(sale_data)

@router.post("/pos", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def create_sale_from_pos(
    sale_data: SaleCreateRequest,
    db: Session = Depends(get_db)
):
    """Alias de POST /sales"""
    service = SalesService(db)
    return await service.checkout_response(sale_data)

# ==================== ABONOS ====================

@router.post("/sales/{sale_id}/payment", response_model=PaymentResponse)
async def add_payment(
    sale_id: int,
    payment: PaymentRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar abono sobre una venta

    La venta pasa a 'completed' cuando lo abonado cubre el total en COP
    (tolerancia 50) o en USD (tolerancia 0.1).
    """
    service = SalesService(db)
    return await service.record_payment_response(sale_id, payment)

# ==================== CONSULTAS ====================

@router.get("/sales", response_model=SaleListResponse)
async def list_sales(
    sale_status: Optional[SaleStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    service = SalesService(db)
    return await service.list_sales(sale_status=sale_status, customer_id=customer_id)

@router.get("/sales/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: int, db: Session = Depends(get_db)):
    service = SalesService(db)
    return await service.get_sale(sale_id)
