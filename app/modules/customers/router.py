# app/modules/customers/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from .service import CustomerService
from .schemas import CustomerCreateRequest, CustomerUpdateRequest, CustomerResponse, CustomerListResponse

router = APIRouter(prefix="/customers", tags=["Customers"])

@router.get("", response_model=CustomerListResponse)
async def list_customers(db: Session = Depends(get_db)):
    service = CustomerService(db)
    return await service.list_customers()

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: int, db: Session = Depends(get_db)):
    service = CustomerService(db)
    return await service.get_customer(customer_id)

@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreateRequest,
    db: Session = Depends(get_db)
):
    """Registrar cliente. El documento de identidad es opcional pero único."""
    service = CustomerService(db)
    return await service.create_customer(customer_data)

@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdateRequest,
    db: Session = Depends(get_db)
):
    service = CustomerService(db)
    return await service.update_customer(customer_id, customer_data)
