"""Forms for master data: companies, suppliers, items and user accounts."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from erpdesk.core.auth.roles import Role
from erpdesk.core.pages.forms import ApiForm

CompanyType = Literal["SUPPLIER", "CUSTOMER"]
ItemCategory = Literal["RAW_MATERIAL", "COMPONENT", "FINISHED_PRODUCT", "CONSUMABLE"]

COMPANY_TYPES = ("SUPPLIER", "CUSTOMER")
ITEM_CATEGORIES = ("RAW_MATERIAL", "COMPONENT", "FINISHED_PRODUCT", "CONSUMABLE")


class CompanyForm(ApiForm):
    name: str = Field(min_length=1, max_length=100)
    business_number: str = Field(alias="businessNumber", min_length=1, max_length=20)
    ceo: Optional[str] = Field(default=None, max_length=50)
    type: CompanyType = "CUSTOMER"
    phone: Optional[str] = Field(default=None, max_length=32)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, max_length=200)
    is_active: bool = Field(default=False, alias="isActive")


class SupplierForm(CompanyForm):
    type: CompanyType = "SUPPLIER"

    @field_validator("type", mode="before")
    @classmethod
    def always_supplier(cls, v: Any) -> str:
        return "SUPPLIER"


class ItemForm(ApiForm):
    code: str = Field(min_length=1, max_length=30)
    name: str = Field(min_length=1, max_length=100)
    category: ItemCategory
    unit: str = Field(default="EA", min_length=1, max_length=10)
    price: float = Field(default=0, ge=0)
    cost: float = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0, alias="minStock")
    max_stock: int = Field(default=0, ge=0, alias="maxStock")
    safety_stock: int = Field(default=0, ge=0, alias="safetyStock")
    lead_time: int = Field(default=0, ge=0, alias="leadTime")
    specification: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def stock_bounds(self) -> "ItemForm":
        if self.max_stock and self.min_stock > self.max_stock:
            raise ValueError("minimum stock cannot exceed maximum stock")
        return self


class UserRegisterForm(ApiForm):
    """Account created by an administrator; the admin's own session is untouched."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str = Field(alias="confirmPassword")
    role: Role = Role.USER
    department: Optional[str] = Field(default=None, max_length=100)
    position: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)

    @field_validator("role", mode="before")
    @classmethod
    def known_role(cls, v: Any) -> Any:
        if v is None:
            return Role.USER
        role = Role.parse(v)
        if role is None:
            raise ValueError("unknown role")
        return role

    @model_validator(mode="after")
    def passwords_match(self) -> "UserRegisterForm":
        if self.password != self.confirm_password:
            raise ValueError("passwords do not match")
        return self

    def api_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude_none=True, exclude={"confirm_password"}, mode="json")
        payload["role"] = self.role.value
        return payload
