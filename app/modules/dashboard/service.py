# app/modules/dashboard/service.py
from datetime import datetime, date
from typing import Optional
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.shared.services.currency_service import Currency, ZERO, derive_missing_total
from app.shared.services.exchange_rate_store import ExchangeRateStore
from app.modules.inventory.repository import InventoryRepository
from app.modules.customers.repository import CustomerRepository
from app.modules.financial.repository import FinancialRepository
from app.modules.sales.service import WALK_IN_CUSTOMER
from .schemas import DashboardResponse, DashboardStats, LowStockProduct, RecentSale

class DashboardService:
    """
    Métricas del día para la pantalla principal
    """

    def __init__(self, db: Session, rate_store: Optional[ExchangeRateStore] = None):
        self.db = db
        self.rate_store = rate_store or ExchangeRateStore(db)
        self.sales = FinancialRepository(db)
        self.inventory = InventoryRepository(db)
        self.customers = CustomerRepository(db)

    async def get_dashboard(self, target_date: Optional[date] = None) -> DashboardResponse:
        target_date = target_date or date.today()
        rates = self.rate_store.as_dict()
        cop_rate = rates.get(Currency.COP.value, ZERO)
        ves_rate = rates.get(Currency.VES.value, ZERO)

        today = self.sales.get_sales_totals(target_date)

        stats = DashboardStats(
            today_sales_usd=today["total_usd"],
            today_sales_cop=derive_missing_total(today["total_cop"], today["total_usd"], cop_rate),
            today_sales_ves=derive_missing_total(today["total_ves"], today["total_usd"], ves_rate),
            today_sales_count=today["count"],
            total_products=self.inventory.count_products(),
            low_stock_count=self.inventory.count_low_stock(settings.low_stock_threshold),
            total_customers=self.customers.count_customers()
        )

        low_stock = self.inventory.get_low_stock_products(
            settings.low_stock_threshold, settings.low_stock_limit
        )

        recent_sales = [
            RecentSale(
                id=sale.id,
                customer_name=sale.customer.name if sale.customer else WALK_IN_CUSTOMER,
                total_usd=sale.total_usd,
                total_cop=derive_missing_total(sale.total_cop, sale.total_usd, cop_rate),
                total_ves=derive_missing_total(sale.total_ves, sale.total_usd, ves_rate),
                status=sale.status,
                created_at=sale.created_at
            )
            for sale in self.sales.get_recent_sales(settings.recent_sales_limit)
        ]

        return DashboardResponse(
            success=True,
            dashboard_timestamp=datetime.now(),
            stats=stats,
            low_stock_products=[LowStockProduct.model_validate(p) for p in low_stock],
            recent_sales=recent_sales,
            exchange_rates=rates
        )
