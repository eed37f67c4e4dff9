# app/modules/inventory/repository.py
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func, or_

from app.shared.database.models import Product

class InventoryRepository:
    """
    Acceso a datos del catálogo: stock y precios por producto
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== CONSULTAS ====================

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.sku == sku).first()

    def get_existing_ids(self, product_ids: Iterable[int]) -> set:
        ids = set(product_ids)
        if not ids:
            return set()
        rows = self.db.query(Product.id).filter(Product.id.in_(ids)).all()
        return {row.id for row in rows}

    def list_products(self, search: Optional[str] = None) -> List[Product]:
        query = self.db.query(Product)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    def count_products(self) -> int:
        return self.db.query(func.count(Product.id)).scalar() or 0

    def count_low_stock(self, threshold: int) -> int:
        return self.db.query(func.count(Product.id)).filter(Product.stock < threshold).scalar() or 0

    def get_low_stock_products(self, threshold: int, limit: int) -> List[Product]:
        return self.db.query(Product).filter(
            Product.stock < threshold
        ).order_by(Product.stock.asc(), Product.id.asc()).limit(limit).all()

    # ==================== BLOQUEO Y STOCK ====================

    def lock_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        SELECT ... FOR UPDATE sobre los productos de la venta.

        Los bloqueos se toman en orden ascendente de id para que dos ventas
        con productos en común no se bloqueen mutuamente.
        """
        locked = {}
        for product_id in sorted(set(product_ids)):
            product = self.db.query(Product).filter(
                Product.id == product_id
            ).with_for_update().first()
            if product is not None:
                locked[product_id] = product
        return locked

    def decrement_stock(self, product: Product, quantity: int) -> None:
        """Descontar stock de un producto ya bloqueado. No hace commit."""
        if product.stock < quantity:
            raise ValueError(f"Stock insuficiente para {product.name}")
        product.stock -= quantity

    # ==================== ESCRITURA ====================

    def create_product(self, data: dict) -> Product:
        product = Product(**data)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: Product, data: dict) -> Product:
        for key, value in data.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    # ==================== REAJUSTE DE PRECIOS ====================

    def rescale_selling_prices(self, factor: Decimal) -> int:
        """
        Multiplicar el precio de venta de TODOS los productos por el factor
        en un único UPDATE. No toca cost_price. No hace commit.
        """
        return self.db.query(Product).update(
            {Product.selling_price: Product.selling_price * factor},
            synchronize_session=False
        )

    def margin_totals(self) -> Tuple[Decimal, Decimal]:
        """(suma de precios de venta, suma de costos) de todo el catálogo"""
        row = self.db.query(
            func.coalesce(func.sum(Product.selling_price), 0).label('selling'),
            func.coalesce(func.sum(Product.cost_price), 0).label('cost')
        ).one()
        return Decimal(str(row.selling)), Decimal(str(row.cost))
