# app/modules/financial/service.py
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Optional
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.shared.services.currency_service import Currency, ZERO, derive_missing_total, to_decimal
from app.shared.services.exchange_rate_store import ExchangeRateStore
from app.modules.inventory.repository import InventoryRepository
from app.modules.sales.service import WALK_IN_CUSTOMER
from .repository import FinancialRepository
from .schemas import (
    RateUpdateRequest, RateUpdateResponse, RatesResponse, PriceAdjustment,
    FinancialSummary, FinancialSummaryResponse, DebtorInfo, DebtorsResponse
)

logger = logging.getLogger(__name__)

class FinancialService:
    """
    Tasas de cambio, reajuste de precios y reportes de cobranza
    """

    def __init__(self, db: Session, rate_store: Optional[ExchangeRateStore] = None):
        self.db = db
        self.rate_store = rate_store or ExchangeRateStore(db)
        self.repository = FinancialRepository(db)
        self.inventory = InventoryRepository(db)

    # ==================== TASAS DE CAMBIO ====================

    async def list_rates(self) -> RatesResponse:
        return RatesResponse(success=True, rates=self.rate_store.as_dict())

    async def update_rates(self, rate_data: RateUpdateRequest) -> RateUpdateResponse:
        """
        Actualizar tasas y, si se pide, congelar los precios en COP.

        Proceso (una sola transacción):
        1. Leer la tasa COP actual bloqueando su fila
        2. Sobrescribir cada tasa recibida
        3. Si freeze_cop_prices y la tasa COP cambió:
           factor = tasa_anterior / tasa_nueva y se multiplica el
           selling_price de todos los productos por ese factor.
           cost_price no se toca, así que el margen cambia.
        """
        adjustment = None
        try:
            old_cop_rate = self.rate_store.get_rate_for_update(Currency.COP.value)

            for entry in rate_data.rates:
                self.rate_store.set_rate(entry.currency_code, entry.rate)

            new_cop_rate = next(
                (entry.rate for entry in rate_data.rates if entry.currency_code == Currency.COP.value),
                None
            )

            if rate_data.freeze_cop_prices and old_cop_rate and new_cop_rate and old_cop_rate != new_cop_rate:
                adjustment = self._rescale_prices(old_cop_rate, new_cop_rate)

            self.db.commit()

        except Exception:
            logger.exception("Error actualizando tasas")
            self.db.rollback()
            raise

        rates = self.rate_store.as_dict()
        logger.info(f"Tasas actualizadas: {', '.join(f'{k}={v}' for k, v in rates.items())}")

        message = "Tasas actualizadas."
        if adjustment is not None:
            message += " Los precios base en USD se han ajustado para mantener el valor en COP."

        return RateUpdateResponse(
            success=True,
            message=message,
            rates=rates,
            prices_adjusted=adjustment is not None,
            adjustment=adjustment
        )

    def _rescale_prices(self, old_cop_rate: Decimal, new_cop_rate: Decimal) -> PriceAdjustment:
        factor = to_decimal(old_cop_rate) / to_decimal(new_cop_rate)

        selling_before, cost = self.inventory.margin_totals()
        updated = self.inventory.rescale_selling_prices(factor)
        selling_after, _ = self.inventory.margin_totals()

        margin_before = selling_before - cost
        margin_after = selling_after - cost

        logger.info(
            f"Reajuste de precios COP {old_cop_rate} -> {new_cop_rate}: factor {factor:.6f}, "
            f"{updated} productos, margen {margin_before:.6f} -> {margin_after:.6f}"
        )

        return PriceAdjustment(
            old_cop_rate=old_cop_rate,
            new_cop_rate=new_cop_rate,
            adjustment_factor=factor,
            products_updated=updated,
            margin_before=margin_before,
            margin_after=margin_after,
            margin_delta=margin_after - margin_before
        )

    def current_rates(self) -> Dict[str, Decimal]:
        """Tasas vigentes con los valores por defecto si falta alguna"""
        return {
            Currency.COP.value: self.rate_store.get_rate(Currency.COP.value, settings.default_cop_rate),
            Currency.VES.value: self.rate_store.get_rate(Currency.VES.value, settings.default_ves_rate),
        }

    # ==================== RESUMEN FINANCIERO ====================

    async def get_summary(self, target_date: Optional[date] = None) -> FinancialSummaryResponse:
        target_date = target_date or date.today()
        rates = self.current_rates()
        cop_rate = rates[Currency.COP.value]
        ves_rate = rates[Currency.VES.value]

        all_time = self.repository.get_sales_totals()
        today = self.repository.get_sales_totals(target_date)

        debt_cop, debt_usd = ZERO, ZERO
        for sale in self.repository.get_pending_sales():
            debt_cop += to_decimal(sale.total_cop) - to_decimal(sale.paid_amount_cop)
            debt_usd += to_decimal(sale.total_usd) - to_decimal(sale.paid_amount_usd)

        summary = FinancialSummary(
            total_usd=all_time["total_usd"],
            total_cop=derive_missing_total(all_time["total_cop"], all_time["total_usd"], cop_rate),
            total_ves=derive_missing_total(all_time["total_ves"], all_time["total_usd"], ves_rate),
            total_sales=all_time["count"],
            today_sales=today["count"],
            today_total_usd=today["total_usd"],
            today_total_cop=derive_missing_total(today["total_cop"], today["total_usd"], cop_rate),
            today_total_ves=derive_missing_total(today["total_ves"], today["total_usd"], ves_rate),
            total_paid_cop=all_time["paid_cop"],
            total_paid_usd=all_time["paid_usd"],
            total_debt_cop=debt_cop,
            total_debt_usd=debt_usd,
            net_worth_cop=all_time["paid_cop"] + debt_cop
        )

        return FinancialSummaryResponse(
            success=True,
            summary=summary,
            exchange_rates=self.rate_store.as_dict()
        )

    # ==================== DEUDORES ====================

    async def get_debtors(self) -> DebtorsResponse:
        """Ventas pendientes agrupadas por cliente (sin cliente = Cliente Eventual)"""
        grouped: Dict[int, DebtorInfo] = {}

        for sale in self.repository.get_pending_sales():
            key = sale.customer_id or 0
            debtor = grouped.get(key)
            if debtor is None:
                debtor = DebtorInfo(
                    customer_id=key,
                    customer_name=sale.customer.name if sale.customer else WALK_IN_CUSTOMER,
                    total_debt_cop=ZERO,
                    total_debt_usd=ZERO,
                    sale_count=0
                )
                grouped[key] = debtor

            debtor.total_debt_cop += to_decimal(sale.total_cop) - to_decimal(sale.paid_amount_cop)
            debtor.total_debt_usd += to_decimal(sale.total_usd) - to_decimal(sale.paid_amount_usd)
            debtor.sale_count += 1

        debtors = list(grouped.values())
        return DebtorsResponse(
            success=True,
            debtors=debtors,
            count=len(debtors),
            total_debt_cop=sum((d.total_debt_cop for d in debtors), ZERO),
            total_debt_usd=sum((d.total_debt_usd for d in debtors), ZERO)
        )
