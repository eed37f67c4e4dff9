from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List
from decimal import Decimal

class Settings(BaseSettings):
    # App Info
    app_name: str = "Bodeguita POS API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    
    # Database
    database_url: str = "sqlite:///./bodeguita.db"
    
    # CORS
    allowed_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    
    # Tasas por defecto (unidades de la moneda por 1 USD)
    default_cop_rate: Decimal = Field(default=Decimal("3650"), description="Tasa COP inicial")
    default_ves_rate: Decimal = Field(default=Decimal("520"), description="Tasa VES inicial")
    
    # Tolerancias para dar por saldada una venta
    cop_tolerance: Decimal = Field(default=Decimal("50"), description="Tolerancia en COP")
    usd_tolerance: Decimal = Field(default=Decimal("0.1"), description="Tolerancia en USD")
    
    # Validación de totales enviados por el POS
    strict_totals: bool = Field(default=False, description="Rechazar ventas con totales inconsistentes")
    totals_mismatch_tolerance_usd: Decimal = Field(default=Decimal("0.01"))
    
    # Reportes
    low_stock_threshold: int = 10
    low_stock_limit: int = 5
    recent_sales_limit: int = 3
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    
    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
