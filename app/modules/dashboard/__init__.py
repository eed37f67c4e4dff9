# app/modules/dashboard/__init__.py
"""
Módulo Dashboard - Resumen del día (solo lectura)
"""

from .router import router as dashboard_router
from .service import DashboardService

__all__ = [
    "dashboard_router",
    "DashboardService"
]
