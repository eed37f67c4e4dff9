# app/modules/financial/__init__.py
"""
Módulo Financiero - Tasas de cambio y cobranza

- Actualización de tasas COP/VES con reajuste opcional de precios
- Resumen de ventas, abonos y deuda
- Deudores agrupados por cliente
"""

from .router import router as financial_router
from .service import FinancialService
from .repository import FinancialRepository

__all__ = [
    "financial_router",
    "FinancialService",
    "FinancialRepository"
]
