from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import List, Optional
from datetime import datetime

class CustomerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del cliente")
    email: Optional[EmailStr] = Field(None, description="Correo electrónico")
    phone: Optional[str] = Field(None, max_length=20, description="Teléfono")
    address: Optional[str] = Field(None, description="Dirección")
    identity_document: Optional[str] = Field(None, max_length=50, description="Cédula / documento (único)")

    @field_validator('identity_document')
    @classmethod
    def normalize_document(cls, v: Optional[str]):
        if v is None:
            return None
        v = v.strip()
        return v or None

class CustomerUpdateRequest(CustomerCreateRequest):
    pass

class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    identity_document: Optional[str]
    created_at: Optional[datetime] = None

class CustomerListResponse(BaseModel):
    success: bool
    customers: List[CustomerResponse]
    count: int
