"""
Pydantic models for the POS backend resources and the dashboard forms.

Field names mirror the backend's camelCase JSON; unknown fields are kept so
pages can show whatever extra data the backend sends.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Role(str, Enum):
    ADMIN = "ADMIN"
    KASIR = "KASIR"


class ProductStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OUT_OF_STOCK = "OUT_OF_STOCK"


# =============================================================================
# Resources
# =============================================================================


class Resource(BaseModel):
    """Base for backend resources."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class User(Resource):
    id: Union[int, str]
    email: str
    name: Optional[str] = None
    role: Role

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Admin"


class Category(Resource):
    id: Union[int, str]
    name: str
    description: Optional[str] = None


class CategoryRef(Resource):
    id: Union[int, str]
    name: str


class Product(Resource):
    id: Union[int, str]
    name: str
    description: Optional[str] = None
    price: float = 0.0
    stock: int = 0
    category_id: Optional[Union[int, str]] = Field(default=None, alias="categoryId")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    status: Optional[ProductStatus] = None
    category: Optional[CategoryRef] = None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Any:
        # Decimal columns arrive as strings ("15000.00")
        if isinstance(value, str):
            return float(value) if value.strip() else 0.0
        return value

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else ""


class LoginResult(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    user: User


# =============================================================================
# Reports
# =============================================================================


class ReportSummary(Resource):
    total_revenue: float = Field(default=0.0, alias="totalRevenue")
    total_transactions: int = Field(default=0, alias="totalTransactions")
    average_transaction_value: float = Field(default=0.0, alias="averageTransactionValue")


class BestSeller(Resource):
    product_name: str = Field(default="", alias="productName")
    quantity_sold: int = Field(default=0, alias="quantitySold")
    revenue: float = 0.0


class CategoryRevenue(Resource):
    category: str = ""
    revenue: float = 0.0
    items_sold: int = Field(default=0, alias="itemsSold")


class TransactionRow(Resource):
    id: Optional[Union[int, str]] = None
    transaction_number: Optional[str] = Field(default=None, alias="transactionNumber")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    cashier: Optional[str] = None
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    item_count: int = Field(default=0, alias="itemCount")
    total_amount: float = Field(default=0.0, alias="totalAmount")

    @field_validator("cashier", mode="before")
    @classmethod
    def _flatten_cashier(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("name") or value.get("email")
        return value

    @property
    def reference(self) -> str:
        return self.transaction_number or (f"#{self.id}" if self.id is not None else "-")


class SalesReport(Resource):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    best_sellers: list[BestSeller] = Field(default_factory=list, alias="bestSellers")
    revenue_by_payment_method: dict[str, float] = Field(default_factory=dict, alias="revenueByPaymentMethod")
    transactions: list[TransactionRow] = Field(default_factory=list)

    @field_validator("best_sellers", "transactions", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return value or []

    @field_validator("revenue_by_payment_method", mode="before")
    @classmethod
    def _none_to_dict(cls, value: Any) -> Any:
        return value or {}


# =============================================================================
# Forms
# =============================================================================


class Form(BaseModel):
    """Base for request payloads built from page forms."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class CategoryForm(Form):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""


class ProductForm(Form):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    category_id: str = Field(min_length=1, alias="categoryId")
    status: Optional[ProductStatus] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_id_as_str(cls, value: Any) -> Any:
        return "" if value is None else str(value)


class ProductUpdateForm(Form):
    """Partial product update; only fields that are set are sent."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    status: Optional[ProductStatus] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_id_as_str(cls, value: Any) -> Any:
        return None if value is None else str(value)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        # Empty strings mean "not provided" for these, except description
        for key in ("name", "categoryId", "imageUrl"):
            if payload.get(key) == "":
                payload.pop(key)
        return payload


class UserCreateForm(Form):
    email: str = Field(min_length=3, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)
    role: Role = Role.KASIR


class UserUpdateForm(Form):
    """The backend only accepts name changes on PATCH /users/:id."""

    name: str = Field(min_length=1, max_length=100)
