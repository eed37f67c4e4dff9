from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== ESTADOS =====

class SaleStatus(str, Enum):
    """Estados de una venta. Solo se permite pending -> completed."""
    completed = "completed"
    pending = "pending"

    def can_transition_to(self, target: "SaleStatus") -> bool:
        if self == target:
            return True
        return self == SaleStatus.pending and target == SaleStatus.completed

# ===== PRODUCTOS =====

class Product(Base, TimestampMixin):
    """Producto del catálogo. Precios siempre en USD."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    sku = Column(String(100), unique=True, nullable=True, index=True)
    cost_price = Column(Numeric(20, 6), nullable=False, default=0)
    selling_price = Column(Numeric(20, 6), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)

    # Relationships
    sale_items = relationship("SaleItem", back_populates="product")

# ===== TASAS DE CAMBIO =====

class ExchangeRate(Base):
    """Tasa vigente por moneda (unidades de la moneda por 1 USD). Sin historial."""
    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True, index=True)
    currency_code = Column(String(10), unique=True, nullable=False, index=True)
    rate = Column(Numeric(15, 4), nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# ===== CLIENTES =====

class Customer(Base):
    """Cliente. Las ventas sin cliente son 'Cliente Eventual'."""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(20))
    address = Column(Text)
    identity_document = Column(String(50), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    sales = relationship("Sale", back_populates="customer")

# ===== VENTAS =====

class Sale(Base, TimestampMixin):
    """Cabecera de venta con totales y abonos en las tres monedas"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    total_usd = Column(Numeric(15, 2), nullable=False)
    total_ves = Column(Numeric(15, 4), nullable=False)
    total_cop = Column(Numeric(15, 4), nullable=False)
    paid_amount_usd = Column(Numeric(15, 2), nullable=False, default=0)
    paid_amount_ves = Column(Numeric(15, 4), nullable=False, default=0)
    paid_amount_cop = Column(Numeric(15, 4), nullable=False, default=0)
    exchange_rate_ves = Column(Numeric(15, 4), nullable=False)
    exchange_rate_cop = Column(Numeric(15, 4), nullable=False)
    status = Column(String(20), nullable=False, default=SaleStatus.completed.value)

    # Relationships
    customer = relationship("Customer", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan", order_by="SaleItem.id")

    @property
    def sale_status(self) -> SaleStatus:
        return SaleStatus(self.status)

    @property
    def is_pending(self) -> bool:
        return self.sale_status == SaleStatus.pending

    def mark_completed(self) -> None:
        """Transición de un solo sentido: una venta saldada no vuelve a pendiente"""
        if not self.sale_status.can_transition_to(SaleStatus.completed):
            raise ValueError(f"Transición inválida: {self.status} -> completed")
        self.status = SaleStatus.completed.value

class SaleItem(Base):
    """Línea de venta. price_usd es una foto del precio al momento de la venta."""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_usd = Column(Numeric(20, 6), nullable=False)
    subtotal_usd = Column(Numeric(20, 6), nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product", back_populates="sale_items")
