from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal, Optional


CheckoutMode = Literal["payment", "subscription"]
MONTHLY = "monthly"

class DonationRequest(BaseModel):
    """Fields submitted by the donation form."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[float] = None  # major units, e.g. dollars
    frequency: Any = None  # only the exact string "monthly" means recurring
    email: Optional[str] = None
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def missing_name_is_blank(cls, value):
        return "" if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_monthly(self) -> bool:
        return self.frequency == MONTHLY

class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = ""
    origin: Optional[str] = None
    production: bool = False
    port: int = 3000

class ProductData(BaseModel):
    name: str
    description: str

class Recurring(BaseModel):
    interval: Literal["month"] = "month"

class PriceData(BaseModel):
    currency: str = "usd"
    product_data: ProductData
    unit_amount: int  # minor units
    recurring: Optional[Recurring] = None

class LineItem(BaseModel):
    price_data: PriceData
    quantity: int = 1

class CheckoutConfig(BaseModel):
    """A Checkout Session to be created, independent of any SDK call."""

    payment_method_types: list[str] = Field(default_factory=lambda: ["card"])
    customer_email: Optional[str] = None
    billing_address_collection: str = "auto"
    phone_number_collection: dict = Field(default_factory=lambda: {"enabled": False})
    success_url: str
    cancel_url: str
    metadata: dict[str, str]
    mode: CheckoutMode
    line_items: list[LineItem]
    submit_type: Optional[str] = None

    def to_stripe_params(self) -> dict:
        return self.model_dump(exclude_none=True)

class SessionSummary(BaseModel):
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    amount_total: Optional[int] = None
    mode: Optional[str] = None
