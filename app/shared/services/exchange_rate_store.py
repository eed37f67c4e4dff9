# app/shared/services/exchange_rate_store.py
from decimal import Decimal
from typing import Dict, Mapping, Optional
from sqlalchemy.orm import Session

from app.shared.database.models import ExchangeRate
from .currency_service import to_decimal


class ExchangeRateStore:
    """
    Tasas vigentes por código de moneda (una fila por moneda, sin historial).

    Se pasa explícitamente a los servicios que la necesitan. Ningún método
    hace commit: la transacción la controla el servicio que llama.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self, currency_code: str):
        return self.db.query(ExchangeRate).filter(
            ExchangeRate.currency_code == currency_code.upper()
        )

    def get_rate(self, currency_code: str, default: Optional[Decimal] = None) -> Optional[Decimal]:
        row = self._query(currency_code).first()
        if row is None or row.rate is None:
            return default
        return to_decimal(row.rate)

    def get_rate_for_update(self, currency_code: str) -> Optional[Decimal]:
        """Leer la tasa bloqueando la fila hasta el fin de la transacción"""
        row = self._query(currency_code).with_for_update().first()
        if row is None or row.rate is None:
            return None
        return to_decimal(row.rate)

    def as_dict(self) -> Dict[str, Decimal]:
        rows = self.db.query(ExchangeRate).order_by(ExchangeRate.currency_code).all()
        return {row.currency_code: to_decimal(row.rate) for row in rows}

    def set_rate(self, currency_code: str, rate: Decimal) -> ExchangeRate:
        """Sobrescribe la tasa (o crea la fila si la moneda no existe)"""
        row = self._query(currency_code).first()
        if row is None:
            row = ExchangeRate(currency_code=currency_code.upper(), rate=rate)
            self.db.add(row)
        else:
            row.rate = rate
        self.db.flush()
        return row

    def seed_defaults(self, defaults: Mapping[str, Decimal]) -> None:
        """Crea las monedas que falten sin tocar las existentes"""
        for code, rate in defaults.items():
            if self._query(code).first() is None:
                self.db.add(ExchangeRate(currency_code=code.upper(), rate=rate))
        self.db.flush()
