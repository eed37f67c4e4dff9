# app/api/v1/router.py
from fastapi import APIRouter

from app.config.settings import settings
from app.modules.sales import sales_router
from app.modules.inventory import inventory_router
from app.modules.customers import customers_router
from app.modules.financial import financial_router
from app.modules.dashboard import dashboard_router


# Crear router principal de la API v1
api_router = APIRouter(prefix="/api/v1")

# ==================== MÓDULOS ====================

api_router.include_router(sales_router)
api_router.include_router(inventory_router)
api_router.include_router(customers_router)
api_router.include_router(financial_router)
api_router.include_router(dashboard_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "sales": "/api/v1/sales",
            "pos": "/api/v1/pos",
            "inventory": "/api/v1/inventory",
            "customers": "/api/v1/customers",
            "exchange_rates": "/api/v1/exchange-rates",
            "financial": "/api/v1/financial",
            "dashboard": "/api/v1/dashboard"
        }
    }

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }
