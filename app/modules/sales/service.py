# app/modules/sales/service.py
import logging
from decimal import Decimal
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.shared.database.models import Sale, SaleStatus
from app.shared.services.currency_service import (
    ZERO, to_decimal, cart_total_usd, display_amounts
)
from app.modules.inventory.repository import InventoryRepository
from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, PaymentRequest, SaleResponse, SaleItemResponse,
    CheckoutResponse, PaymentResponse, SaleListResponse
)

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Cliente Eventual"


def is_sale_settled(sale: Sale, cop_tolerance: Decimal, usd_tolerance: Decimal) -> bool:
    """
    Una venta queda saldada si lo abonado cubre el total en COP o en USD,
    descontando la tolerancia de cada moneda.
    """
    paid_cop = to_decimal(sale.paid_amount_cop)
    paid_usd = to_decimal(sale.paid_amount_usd)
    is_paid_cop = paid_cop >= to_decimal(sale.total_cop) - cop_tolerance
    is_paid_usd = paid_usd >= to_decimal(sale.total_usd) - usd_tolerance
    return is_paid_cop or is_paid_usd


def build_sale_response(sale: Sale) -> SaleResponse:
    balance = {
        "usd": max(ZERO, to_decimal(sale.total_usd) - to_decimal(sale.paid_amount_usd)),
        "cop": max(ZERO, to_decimal(sale.total_cop) - to_decimal(sale.paid_amount_cop)),
        "ves": max(ZERO, to_decimal(sale.total_ves) - to_decimal(sale.paid_amount_ves)),
    }
    return SaleResponse(
        id=sale.id,
        customer_id=sale.customer_id,
        customer_name=sale.customer.name if sale.customer else WALK_IN_CUSTOMER,
        total_usd=sale.total_usd,
        total_cop=sale.total_cop,
        total_ves=sale.total_ves,
        paid_amount_usd=sale.paid_amount_usd,
        paid_amount_cop=sale.paid_amount_cop,
        paid_amount_ves=sale.paid_amount_ves,
        exchange_rate_ves=sale.exchange_rate_ves,
        exchange_rate_cop=sale.exchange_rate_cop,
        status=sale.sale_status,
        created_at=sale.created_at,
        items=[
            SaleItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product.name if item.product else None,
                quantity=item.quantity,
                price_usd=item.price_usd,
                subtotal_usd=item.subtotal_usd
            )
            for item in sale.items
        ],
        balance=balance,
        display={
            "totals": display_amounts(sale.total_usd, sale.total_cop, sale.total_ves),
            "balance": display_amounts(balance["usd"], balance["cop"], balance["ves"]),
        }
    )


class SalesService:
    """
    Checkout atómico y registro de abonos sobre ventas pendientes
    """

    def __init__(
        self,
        db: Session,
        cop_tolerance: Optional[Decimal] = None,
        usd_tolerance: Optional[Decimal] = None,
        strict_totals: Optional[bool] = None
    ):
        self.db = db
        self.repository = SalesRepository(db)
        self.inventory = InventoryRepository(db)
        self.cop_tolerance = settings.cop_tolerance if cop_tolerance is None else cop_tolerance
        self.usd_tolerance = settings.usd_tolerance if usd_tolerance is None else usd_tolerance
        self.strict_totals = settings.strict_totals if strict_totals is None else strict_totals

    # ==================== CHECKOUT ====================

    async def checkout(self, sale_data: SaleCreateRequest) -> Sale:
        """
        Registrar venta completa en una sola transacción.

        Proceso:
        1. Validar cliente y productos (antes de tocar datos)
        2. Crear cabecera con los totales enviados por el POS
        3. Bloquear productos (SELECT FOR UPDATE, orden por id)
        4. Por cada línea: verificar stock, crear item con el precio
           del producto bloqueado y descontar stock
        5. Commit único; cualquier error revierte todo
        """
        self._validate_references(sale_data)

        try:
            sale = self.repository.create_sale_header({
                "customer_id": sale_data.customer_id,
                "total_usd": sale_data.total_usd,
                "total_cop": sale_data.total_cop,
                "total_ves": sale_data.total_ves,
                "paid_amount_usd": sale_data.paid_amount_usd,
                "paid_amount_cop": sale_data.paid_amount_cop,
                "paid_amount_ves": sale_data.paid_amount_ves,
                "exchange_rate_ves": sale_data.exchange_rate_ves,
                "exchange_rate_cop": sale_data.exchange_rate_cop,
                "status": sale_data.status.value,
            })

            locked = self.inventory.lock_products(item.product_id for item in sale_data.items)

            lines = []
            for item in sale_data.items:
                product = locked.get(item.product_id)
                if product is None:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND,
                        detail=f"Producto {item.product_id} no encontrado"
                    )

                if product.stock < item.quantity:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Stock insuficiente para {product.name}"
                    )

                sale_item = self.repository.add_sale_item(sale, product, item.quantity)
                self.inventory.decrement_stock(product, item.quantity)
                lines.append((sale_item.price_usd, item.quantity))

            self._check_totals(sale_data.total_usd, cart_total_usd(lines))

            self.db.commit()

        except HTTPException as e:
            logger.warning(f"Venta rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception("Error en transacción de venta")
            self.db.rollback()
            raise

        logger.info(
            f"Venta {sale.id} registrada - {len(sale_data.items)} items, "
            f"total USD {sale_data.total_usd}, estado {sale_data.status.value}"
        )
        return self.repository.get_sale_by_id(sale.id)

    async def checkout_response(self, sale_data: SaleCreateRequest) -> CheckoutResponse:
        sale = await self.checkout(sale_data)
        return CheckoutResponse(
            success=True,
            message="Venta procesada correctamente.",
            sale=build_sale_response(sale)
        )

    def _validate_references(self, sale_data: SaleCreateRequest) -> None:
        if sale_data.customer_id is not None and not self.repository.customer_exists(sale_data.customer_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Cliente {sale_data.customer_id} no encontrado"
            )

        requested = {item.product_id for item in sale_data.items}
        missing = sorted(requested - self.inventory.get_existing_ids(requested))
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Productos no encontrados: {missing}"
            )

    def _check_totals(self, client_total_usd: Decimal, server_total_usd: Decimal) -> None:
        """
        El total del POS se guarda tal cual; aquí solo se compara contra el
        calculado con los precios bloqueados.
        """
        difference = abs(to_decimal(client_total_usd) - server_total_usd)
        if difference <= settings.totals_mismatch_tolerance_usd:
            return

        message = (
            f"Total USD enviado ({client_total_usd}) difiere del calculado "
            f"({server_total_usd}) en {difference}"
        )
        if self.strict_totals:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
        logger.warning(message)

    # ==================== ABONOS ====================

    async def record_payment(self, sale_id: int, payment: PaymentRequest) -> Sale:
        """
        Registrar abono en una moneda y cerrar la venta si queda saldada.

        Solo se modifica el campo de la moneda del abono; no hay conversión.
        """
        try:
            sale = self.repository.get_sale_for_update(sale_id)
            if not sale:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")

            new_paid = self.repository.apply_payment(sale, payment.currency, payment.amount)

            if is_sale_settled(sale, self.cop_tolerance, self.usd_tolerance):
                sale.mark_completed()

            self.db.commit()

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error registrando abono en venta {sale_id}")
            self.db.rollback()
            raise

        logger.info(
            f"Abono de {payment.amount} {payment.currency.value} en venta {sale_id} "
            f"(acumulado {new_paid}, estado {sale.status})"
        )
        return self.repository.get_sale_by_id(sale_id)

    async def record_payment_response(self, sale_id: int, payment: PaymentRequest) -> PaymentResponse:
        sale = await self.record_payment(sale_id, payment)
        settled = sale.sale_status == SaleStatus.completed
        return PaymentResponse(
            success=True,
            message="Abono registrado correctamente.",
            settled=settled,
            sale=build_sale_response(sale)
        )

    # ==================== CONSULTAS ====================

    async def get_sale(self, sale_id: int) -> SaleResponse:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")
        return build_sale_response(sale)

    async def list_sales(
        self,
        sale_status: Optional[SaleStatus] = None,
        customer_id: Optional[int] = None
    ) -> SaleListResponse:
        sales = self.repository.list_sales(status=sale_status, customer_id=customer_id)
        return SaleListResponse(
            success=True,
            sales=[build_sale_response(s) for s in sales],
            count=len(sales)
        )
