from typing import Literal, Optional

from pydantic import EmailStr, Field

from backoffice.schemas.common import CamelModel

ClientStatus = Literal["active", "inactive"]


class Address(CamelModel):
    street: str
    city: str
    state: str
    postal_code: str
    country: str


class ClientCreate(CamelModel):
    company: str = Field(min_length=1)
    contact_person: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=3)
    status: ClientStatus
    gst_number: str = ""
    msme_number: str = ""
    pan_number: str = ""
    billing_address: Address
    shipping_address: Address
    notes: str = ""
    base_currency: str = Field(min_length=1)


class ClientUpdate(CamelModel):
    company: Optional[str] = Field(default=None, min_length=1)
    contact_person: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=3)
    status: Optional[ClientStatus] = None
    gst_number: Optional[str] = None
    msme_number: Optional[str] = None
    pan_number: Optional[str] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    notes: Optional[str] = None
    base_currency: Optional[str] = Field(default=None, min_length=1)
