import logging
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.shared.database.models import Product, Sale, SaleItem, SaleStatus
from app.modules.sales.service import SalesService
from app.modules.inventory.repository import InventoryRepository
from tests.conftest import build_sale_request


class TestCheckout:
    """Checkout atómico: cabecera + items + descuento de stock"""

    @pytest.mark.asyncio
    async def test_single_item_sale(self, db, make_product):
        product = make_product(name="Harina PAN", selling_price="1.00", stock=5)

        sale = await SalesService(db).checkout(
            build_sale_request([(product.id, 3)], total_usd="3.00")
        )

        db.refresh(product)
        assert product.stock == 2
        assert sale.total_usd == Decimal("3.00")
        assert len(sale.items) == 1
        item = sale.items[0]
        assert item.quantity == 3
        assert item.price_usd == Decimal("1.00")
        assert item.subtotal_usd == Decimal("3.00")

    @pytest.mark.asyncio
    async def test_paid_amounts_default_to_totals(self, db, make_product):
        product = make_product(stock=5)

        sale = await SalesService(db).checkout(build_sale_request([(product.id, 1)], total_usd="1.00"))

        assert sale.sale_status == SaleStatus.completed
        assert sale.paid_amount_usd == sale.total_usd
        assert sale.paid_amount_cop == sale.total_cop
        assert sale.paid_amount_ves == sale.total_ves

    @pytest.mark.asyncio
    async def test_pending_sale_keeps_given_payments(self, db, make_product, make_customer):
        product = make_product(stock=5)
        customer = make_customer(name="Juan Pérez")

        sale = await SalesService(db).checkout(build_sale_request(
            [(product.id, 1)], total_usd="1.00",
            customer_id=customer.id,
            paid_amount_usd=0, paid_amount_cop=1000, paid_amount_ves=0,
            status="pending"
        ))

        assert sale.is_pending
        assert sale.customer.name == "Juan Pérez"
        assert sale.paid_amount_cop == Decimal("1000")
        assert sale.paid_amount_usd == Decimal("0")

    @pytest.mark.asyncio
    async def test_client_totals_stored_as_sent(self, db, make_product):
        product = make_product(selling_price="1.00", stock=5)

        sale = await SalesService(db).checkout(build_sale_request(
            [(product.id, 1)], total_usd="1.00", total_cop=Decimal("3700")
        ))

        assert sale.total_cop == Decimal("3700")


class TestCheckoutStock:

    @pytest.mark.asyncio
    async def test_insufficient_stock_names_product(self, db, make_product):
        product = make_product(name="Arroz Mary", stock=2)

        with pytest.raises(HTTPException) as exc:
            await SalesService(db).checkout(build_sale_request([(product.id, 3)], total_usd="3.00"))

        assert exc.value.status_code == 400
        assert "Arroz Mary" in exc.value.detail
        db.refresh(product)
        assert product.stock == 2
        assert db.query(Sale).count() == 0

    @pytest.mark.asyncio
    async def test_failure_on_last_item_rolls_back_everything(self, db, make_product):
        first = make_product(name="Harina", stock=10)
        last = make_product(name="Aceite", stock=1)

        with pytest.raises(HTTPException):
            await SalesService(db).checkout(
                build_sale_request([(first.id, 2), (last.id, 5)], total_usd="7.00")
            )

        db.refresh(first)
        db.refresh(last)
        assert first.stock == 10
        assert last.stock == 1
        assert db.query(Sale).count() == 0
        assert db.query(SaleItem).count() == 0

    @pytest.mark.asyncio
    async def test_stock_never_goes_negative(self, db, make_product):
        product = make_product(stock=5)
        service = SalesService(db)

        await service.checkout(build_sale_request([(product.id, 3)], total_usd="3.00"))
        with pytest.raises(HTTPException):
            await service.checkout(build_sale_request([(product.id, 3)], total_usd="3.00"))
        await service.checkout(build_sale_request([(product.id, 2)], total_usd="2.00"))
        with pytest.raises(HTTPException):
            await service.checkout(build_sale_request([(product.id, 1)], total_usd="1.00"))

        db.refresh(product)
        assert product.stock == 0
        assert db.query(Sale).count() == 2

    @pytest.mark.asyncio
    async def test_repeated_lines_share_stock(self, db, make_product):
        product = make_product(stock=5)

        with pytest.raises(HTTPException) as exc:
            await SalesService(db).checkout(
                build_sale_request([(product.id, 3), (product.id, 3)], total_usd="6.00")
            )

        assert exc.value.status_code == 400
        db.refresh(product)
        assert product.stock == 5

    def test_locks_taken_in_id_order(self, db, make_product):
        products = [make_product(name=f"P{i}") for i in range(3)]
        ids = [p.id for p in products]

        locked = InventoryRepository(db).lock_products(reversed(ids))

        assert list(locked.keys()) == sorted(ids)

    def test_decrement_below_zero_rejected(self, db, make_product):
        product = make_product(stock=1)

        with pytest.raises(ValueError):
            InventoryRepository(db).decrement_stock(product, 2)


class TestCheckoutReferences:

    @pytest.mark.asyncio
    async def test_unknown_product(self, db, make_product):
        product = make_product(stock=5)

        with pytest.raises(HTTPException) as exc:
            await SalesService(db).checkout(
                build_sale_request([(product.id, 1), (9999, 1)], total_usd="2.00")
            )

        assert exc.value.status_code == 404
        assert db.query(Sale).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_customer(self, db, make_product):
        product = make_product(stock=5)

        with pytest.raises(HTTPException) as exc:
            await SalesService(db).checkout(
                build_sale_request([(product.id, 1)], total_usd="1.00", customer_id=4242)
            )

        assert exc.value.status_code == 404
        db.refresh(product)
        assert product.stock == 5


class TestPriceSnapshot:

    @pytest.mark.asyncio
    async def test_item_price_uses_current_product_price(self, db, make_product):
        product = make_product(selling_price="1.00", stock=5)
        product.selling_price = Decimal("2.50")
        db.commit()

        sale = await SalesService(db).checkout(build_sale_request([(product.id, 2)], total_usd="5.00"))

        assert sale.items[0].price_usd == Decimal("2.50")
        assert sale.items[0].subtotal_usd == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_later_price_change_does_not_touch_items(self, db, make_product):
        product = make_product(selling_price="2.50", stock=5)
        sale = await SalesService(db).checkout(build_sale_request([(product.id, 1)], total_usd="2.50"))
        sale_id = sale.id

        product = db.get(Product, product.id)
        product.selling_price = Decimal("9.99")
        db.commit()

        item = db.query(SaleItem).filter(SaleItem.sale_id == sale_id).one()
        assert item.price_usd == Decimal("2.50")


class TestTotalsCheck:

    @pytest.mark.asyncio
    async def test_mismatch_is_logged_and_accepted(self, db, make_product, caplog):
        product = make_product(selling_price="1.00", stock=5)

        with caplog.at_level(logging.WARNING, logger="app.modules.sales.service"):
            sale = await SalesService(db, strict_totals=False).checkout(
                build_sale_request([(product.id, 2)], total_usd="1.50")
            )

        assert sale.total_usd == Decimal("1.50")
        assert any("difiere" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_strict_mode_rejects_mismatch(self, db, make_product):
        product = make_product(selling_price="1.00", stock=5)

        with pytest.raises(HTTPException) as exc:
            await SalesService(db, strict_totals=True).checkout(
                build_sale_request([(product.id, 2)], total_usd="1.50")
            )

        assert exc.value.status_code == 400
        db.refresh(product)
        assert product.stock == 5
        assert db.query(Sale).count() == 0
