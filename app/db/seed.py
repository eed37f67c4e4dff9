# app/db/seed.py
"""
Datos iniciales: tasas, cliente eventual y productos de ejemplo.

Uso: python -m app.db.seed
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.config.database import Base, SessionLocal, engine
from app.shared.database.models import Customer, Product
from app.shared.services.exchange_rate_store import ExchangeRateStore

logger = logging.getLogger(__name__)

# (sku, nombre, descripción, costo, precio, stock)
PRODUCTS_DATA = [
    ("HPAN01", "Harina PAN", "Harina de maíz precocida 1kg", Decimal("0.90"), Decimal("1.20"), 50),
    ("ARZ01", "Arroz Primor", "Arroz blanco tipo I 1kg", Decimal("1.10"), Decimal("1.50"), 30),
]

WALK_IN_DOCUMENT = "00000000"


def seed_database(db: Session) -> None:
    ExchangeRateStore(db).seed_defaults({
        "VES": settings.default_ves_rate,
        "COP": settings.default_cop_rate,
    })

    if not db.query(Customer).filter(Customer.identity_document == WALK_IN_DOCUMENT).first():
        db.add(Customer(name="Cliente Eventual", identity_document=WALK_IN_DOCUMENT))

    for sku, name, description, cost, price, stock in PRODUCTS_DATA:
        product = db.query(Product).filter(Product.sku == sku).first()
        if product is None:
            product = Product(sku=sku)
            db.add(product)
        product.name = name
        product.description = description
        product.cost_price = cost
        product.selling_price = price
        product.stock = stock

    db.commit()
    logger.info(f"Seed completado: {len(PRODUCTS_DATA)} productos, tasas VES/COP, cliente eventual")


def main():
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
