from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.config.database import Base, get_db
from app.shared.database.models import Customer, ExchangeRate, Product, Sale, SaleStatus
from app.modules.sales.schemas import SaleCreateRequest


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
async def client(session_factory):
    """Async test client with get_db pointed at the test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== FACTORIES ====================

@pytest.fixture
def make_product(db):
    def _make(name="Producto", sku=None, selling_price="1.00", cost_price="0.50", stock=10):
        product = Product(
            name=name,
            sku=sku,
            selling_price=Decimal(str(selling_price)),
            cost_price=Decimal(str(cost_price)),
            stock=stock,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_customer(db):
    def _make(name="Cliente", identity_document=None):
        customer = Customer(name=name, identity_document=identity_document)
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer
    return _make


@pytest.fixture
def make_sale(db):
    """Insert a sale header directly, bypassing checkout."""
    def _make(total_usd="10", total_cop="36500", total_ves="5200",
              paid_usd="0", paid_cop="0", paid_ves="0",
              status=SaleStatus.pending, customer=None):
        sale = Sale(
            customer_id=customer.id if customer else None,
            total_usd=Decimal(str(total_usd)),
            total_cop=Decimal(str(total_cop)),
            total_ves=Decimal(str(total_ves)),
            paid_amount_usd=Decimal(str(paid_usd)),
            paid_amount_cop=Decimal(str(paid_cop)),
            paid_amount_ves=Decimal(str(paid_ves)),
            exchange_rate_ves=Decimal("520"),
            exchange_rate_cop=Decimal("3650"),
            status=status.value,
        )
        db.add(sale)
        db.commit()
        db.refresh(sale)
        return sale
    return _make


@pytest.fixture
def set_rates(db):
    def _set(**rates):
        for code, rate in rates.items():
            row = db.query(ExchangeRate).filter(ExchangeRate.currency_code == code).first()
            if row is None:
                db.add(ExchangeRate(currency_code=code, rate=Decimal(str(rate))))
            else:
                row.rate = Decimal(str(rate))
        db.commit()
    return _set


def build_sale_request(items, total_usd, cop_rate="3650", ves_rate="520", **overrides):
    """Checkout payload with COP/VES totals derived from total_usd."""
    total_usd = Decimal(str(total_usd))
    data = {
        "items": [{"product_id": pid, "quantity": qty} for pid, qty in items],
        "total_usd": total_usd,
        "total_cop": total_usd * Decimal(cop_rate),
        "total_ves": total_usd * Decimal(ves_rate),
        "exchange_rate_cop": Decimal(cop_rate),
        "exchange_rate_ves": Decimal(ves_rate),
    }
    data.update(overrides)
    return SaleCreateRequest(**data)


def as_decimal(value) -> Decimal:
    """JSON numbers may come back as float or str."""
    return Decimal(str(value))
