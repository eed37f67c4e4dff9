# app/modules/dashboard/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from .service import DashboardService
from .schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.get("", response_model=DashboardResponse)
async def get_dashboard(db: Session = Depends(get_db)):
    """
    Dashboard con métricas del día

    - Ventas de hoy en USD, COP y VES
    - Productos con poco stock
    - Últimas ventas
    - Tasas vigentes
    """
    service = DashboardService(db)
    return await service.get_dashboard()
