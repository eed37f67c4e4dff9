from decimal import Decimal

from app.db.seed import seed_database, WALK_IN_DOCUMENT
from app.shared.database.models import Customer, Product
from app.shared.services.exchange_rate_store import ExchangeRateStore


class TestSeed:

    def test_seed_creates_base_data(self, db):
        seed_database(db)

        assert ExchangeRateStore(db).as_dict() == {"COP": Decimal("3650"), "VES": Decimal("520")}
        walk_in = db.query(Customer).filter(Customer.identity_document == WALK_IN_DOCUMENT).one()
        assert walk_in.name == "Cliente Eventual"
        assert {p.sku for p in db.query(Product).all()} == {"HPAN01", "ARZ01"}

    def test_seed_is_idempotent(self, db, set_rates):
        seed_database(db)
        set_rates(COP=4000)
        seed_database(db)

        assert db.query(Product).count() == 2
        assert db.query(Customer).count() == 1
        assert ExchangeRateStore(db).get_rate("COP") == Decimal("4000")
