# app/modules/sales/repository.py
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from app.shared.database.models import Sale, SaleItem, Product, Customer, SaleStatus
from app.shared.services.currency_service import Currency

# Campo de abono que corresponde a cada moneda
PAID_FIELDS = {
    Currency.USD: "paid_amount_usd",
    Currency.COP: "paid_amount_cop",
    Currency.VES: "paid_amount_ves",
}

class SalesRepository:
    """
    Repositorio de ventas. Los métodos de escritura no hacen commit:
    el servicio decide cuándo cerrar la transacción.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== CONSULTAS ====================

    def _sale_query(self):
        return self.db.query(Sale).options(
            joinedload(Sale.customer),
            selectinload(Sale.items).joinedload(SaleItem.product)
        )

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self._sale_query().filter(Sale.id == sale_id).first()

    def get_sale_for_update(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).filter(Sale.id == sale_id).with_for_update().first()

    def list_sales(
        self,
        status: Optional[SaleStatus] = None,
        customer_id: Optional[int] = None
    ) -> List[Sale]:
        query = self._sale_query()
        if status is not None:
            query = query.filter(Sale.status == status.value)
        if customer_id is not None:
            query = query.filter(Sale.customer_id == customer_id)
        query = query.order_by(Sale.created_at.desc(), Sale.id.desc())
        return query.all()

    def customer_exists(self, customer_id: int) -> bool:
        return self.db.query(Customer.id).filter(Customer.id == customer_id).first() is not None

    # ==================== ESCRITURA ====================

    def create_sale_header(self, sale_data: dict) -> Sale:
        sale = Sale(**sale_data)
        self.db.add(sale)
        self.db.flush()  # Obtener sale.id
        return sale

    def add_sale_item(self, sale: Sale, product: Product, quantity: int) -> SaleItem:
        """Crear línea con el precio vigente del producto bloqueado"""
        price = Decimal(str(product.selling_price))
        sale_item = SaleItem(
            product_id=product.id,
            quantity=quantity,
            price_usd=price,
            subtotal_usd=price * quantity
        )
        sale.items.append(sale_item)
        return sale_item

    def apply_payment(self, sale: Sale, currency: Currency, amount: Decimal) -> Decimal:
        """Sumar el abono solo al campo de la moneda indicada. Devuelve el nuevo acumulado."""
        field = PAID_FIELDS[Currency(currency)]
        current = getattr(sale, field) or Decimal("0")
        new_value = Decimal(str(current)) + amount
        setattr(sale, field, new_value)
        return new_value
