# app/shared/services/currency_service.py
"""
Conversión de montos entre USD (moneda base) y las monedas locales COP y VES.

Los montos se guardan siempre con precisión completa; el redondeo es solo
de presentación y nunca se aplica a valores persistidos.
"""
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Tuple, Union

Number = Union[Decimal, int, float, str]

class Currency(str, Enum):
    USD = "USD"
    COP = "COP"
    VES = "VES"

# Decimales para mostrar cada moneda
DISPLAY_PLACES = {
    Currency.USD: 2,
    Currency.COP: 0,
    Currency.VES: 2,
}

# Decimales con los que se guardan los abonos de cada moneda (columnas de sales)
STORAGE_PLACES = {
    Currency.USD: 2,
    Currency.COP: 4,
    Currency.VES: 4,
}

ZERO = Decimal("0")

def to_decimal(value: Number) -> Decimal:
    """Normaliza int/float/str a Decimal pasando por str() para no heredar ruido binario"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

def convert(amount_usd: Number, rate: Number) -> Decimal:
    """USD -> moneda destino. Sin redondeo."""
    return to_decimal(amount_usd) * to_decimal(rate)

def round_for_display(amount: Number, currency: Union[Currency, str]) -> Decimal:
    currency = Currency(currency)
    places = DISPLAY_PLACES[currency]
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)

def fits_storage(amount: Number, currency: Union[Currency, str]) -> bool:
    """True si el monto no pierde decimales al guardarse en la columna de la moneda"""
    amount = to_decimal(amount)
    quantum = Decimal(1).scaleb(-STORAGE_PLACES[Currency(currency)])
    return amount == amount.quantize(quantum)


def derive_missing_total(stored_total: Number, usd_total: Number, rate: Number) -> Decimal:
    """
    Parche de presentación para ventas antiguas sin total en moneda local.

    Si el total guardado es cero y el total USD es positivo, se calcula con
    la tasa actual. El resultado nunca se escribe en la base de datos.
    """
    stored = to_decimal(stored_total)
    usd = to_decimal(usd_total)
    if stored == ZERO and usd > ZERO:
        return convert(usd, rate)
    return stored

def cart_total_usd(lines: Iterable[Tuple[Number, int]]) -> Decimal:
    """Suma precio_unitario * cantidad para cada línea (precio, cantidad)"""
    total = ZERO
    for price, quantity in lines:
        total += to_decimal(price) * quantity
    return total

def display_amounts(usd: Number, cop: Number, ves: Number) -> dict:
    return {
        "usd": float(round_for_display(usd, Currency.USD)),
        "cop": float(round_for_display(cop, Currency.COP)),
        "ves": float(round_for_display(ves, Currency.VES)),
    }
