# app/modules/inventory/__init__.py
"""
Módulo de Inventario - Catálogo de productos

- Alta y edición de productos (precio y stock)
- Bloqueo y descuento de stock usado por el checkout
- Reajuste masivo de precios usado por la actualización de tasas

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as inventory_router
from .service import InventoryService
from .repository import InventoryRepository

__all__ = [
    "inventory_router",
    "InventoryService",
    "InventoryRepository"
]
