# app/modules/sales/__init__.py
"""
Módulo de Ventas - POS multimoneda

- Checkout atómico con bloqueo de productos y descuento de stock
- Abonos en COP, USD o VES sobre ventas pendientes
- Consulta de ventas

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
