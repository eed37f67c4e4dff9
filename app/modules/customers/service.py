# app/modules/customers/service.py
import logging
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.database.models import Customer
from .repository import CustomerRepository
from .schemas import CustomerCreateRequest, CustomerUpdateRequest, CustomerListResponse, CustomerResponse

logger = logging.getLogger(__name__)

class CustomerService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = CustomerRepository(db)

    async def list_customers(self) -> CustomerListResponse:
        customers = self.repository.list_customers()
        return CustomerListResponse(
            success=True,
            customers=[CustomerResponse.model_validate(c) for c in customers],
            count=len(customers)
        )

    async def get_customer(self, customer_id: int) -> Customer:
        customer = self.repository.get_customer_by_id(customer_id)
        if not customer:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
        return customer

    async def create_customer(self, customer_data: CustomerCreateRequest) -> Customer:
        self._ensure_unique_document(customer_data.identity_document)
        customer = self.repository.create_customer(customer_data.model_dump())
        logger.info(f"Cliente {customer.id} registrado")
        return customer

    async def update_customer(self, customer_id: int, customer_data: CustomerUpdateRequest) -> Customer:
        customer = await self.get_customer(customer_id)
        self._ensure_unique_document(customer_data.identity_document, exclude_id=customer.id)
        return self.repository.update_customer(customer, customer_data.model_dump())

    def _ensure_unique_document(self, identity_document: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not identity_document:
            return
        existing = self.repository.get_customer_by_document(identity_document)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "field": "identity_document",
                    "message": f"El documento '{identity_document}' ya está registrado"
                }
            )
