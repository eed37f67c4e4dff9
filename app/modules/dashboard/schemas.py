from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Dict
from datetime import datetime
from decimal import Decimal

class DashboardBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

class DashboardStats(DashboardBaseModel):
    today_sales_usd: Decimal
    today_sales_cop: Decimal
    today_sales_ves: Decimal
    today_sales_count: int
    total_products: int
    low_stock_count: int
    total_customers: int

class LowStockProduct(DashboardBaseModel):
    id: int
    name: str
    sku: Optional[str]
    stock: int
    selling_price: Decimal

class RecentSale(DashboardBaseModel):
    id: int
    customer_name: str
    total_usd: Decimal
    total_cop: Decimal
    total_ves: Decimal
    status: str
    created_at: Optional[datetime]

class DashboardResponse(DashboardBaseModel):
    success: bool
    dashboard_timestamp: datetime
    stats: DashboardStats
    low_stock_products: List[LowStockProduct]
    recent_sales: List[RecentSale]
    exchange_rates: Dict[str, Decimal]
