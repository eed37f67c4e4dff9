# app/modules/financial/repository.py
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func

from app.shared.database.models import Sale, SaleStatus

class FinancialRepository:
    """
    Consultas agregadas de solo lectura sobre ventas
    """

    def __init__(self, db: Session):
        self.db = db

    def get_sales_totals(self, target_date: Optional[date] = None) -> Dict[str, Decimal]:
        """Sumas de totales y abonos (todas las ventas o solo las del día)"""
        query = self.db.query(
            func.count(Sale.id).label('count'),
            func.coalesce(func.sum(Sale.total_usd), 0).label('total_usd'),
            func.coalesce(func.sum(Sale.total_cop), 0).label('total_cop'),
            func.coalesce(func.sum(Sale.total_ves), 0).label('total_ves'),
            func.coalesce(func.sum(Sale.paid_amount_usd), 0).label('paid_usd'),
            func.coalesce(func.sum(Sale.paid_amount_cop), 0).label('paid_cop'),
        )
        if target_date is not None:
            query = query.filter(func.date(Sale.created_at) == target_date)

        row = query.one()
        return {
            "count": row.count or 0,
            "total_usd": Decimal(str(row.total_usd)),
            "total_cop": Decimal(str(row.total_cop)),
            "total_ves": Decimal(str(row.total_ves)),
            "paid_usd": Decimal(str(row.paid_usd)),
            "paid_cop": Decimal(str(row.paid_cop)),
        }

    def get_pending_sales(self) -> List[Sale]:
        return self.db.query(Sale).options(
            joinedload(Sale.customer)
        ).filter(
            Sale.status == SaleStatus.pending.value
        ).order_by(Sale.customer_id, Sale.id).all()

    def get_recent_sales(self, limit: int) -> List[Sale]:
        return self.db.query(Sale).options(
            joinedload(Sale.customer)
        ).order_by(Sale.created_at.desc(), Sale.id.desc()).limit(limit).all()
