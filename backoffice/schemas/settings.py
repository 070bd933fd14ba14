from typing import List, Literal, Optional

from pydantic import Field

from backoffice.schemas.common import CamelModel

Theme = Literal["light", "dark"]


class SettingsDocument(CamelModel):
    id: str

    # Appearance
    theme: Theme = "light"
    sidebar_collapsed: bool = False

    # Notifications
    email_notifications: bool = True
    push_notifications: bool = False
    invoice_reminders: bool = True

    # Company profile
    company_name: str = ""
    company_email: str = ""
    company_phone: str = ""
    company_address: str = ""
    company_gst: str = Field(default="", alias="companyGST")
    company_pan: str = Field(default="", alias="companyPAN")
    company_msme: str = Field(default="", alias="companyMSME")

    # Invoice defaults
    default_tax_rate: float = 18
    default_payment_terms: int = 30
    invoice_prefix: str = "INV"

    # Security
    two_factor_auth: bool = False
    session_timeout: int = 60

    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SettingsHistory(CamelModel):
    items: List[SettingsDocument]
