from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.shared.database.models import Customer

class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_customer_by_document(self, identity_document: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(
            Customer.identity_document == identity_document
        ).first()

    def list_customers(self) -> List[Customer]:
        return self.db.query(Customer).order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    def count_customers(self) -> int:
        return self.db.query(func.count(Customer.id)).scalar() or 0

    def create_customer(self, data: dict) -> Customer:
        customer = Customer(**data)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update_customer(self, customer: Customer, data: dict) -> Customer:
        for key, value in data.items():
            setattr(customer, key, value)
        self.db.commit()
        self.db.refresh(customer)
        return customer
