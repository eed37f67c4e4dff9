# app/modules/customers/__init__.py
"""
Módulo de Clientes - Registro de clientes para ventas a crédito
"""

from .router import router as customers_router
from .service import CustomerService
from .repository import CustomerRepository

__all__ = [
    "customers_router",
    "CustomerService",
    "CustomerRepository"
]
