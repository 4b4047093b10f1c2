"""Employee form."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import EmailStr, Field

from erpdesk.core.pages.forms import ApiForm

EmployeeStatus = Literal["ACTIVE", "INACTIVE", "ON_LEAVE", "TERMINATED"]
Gender = Literal["MALE", "FEMALE", "OTHER"]

EMPLOYEE_STATUSES = ("ACTIVE", "INACTIVE", "ON_LEAVE", "TERMINATED")
GENDERS = ("MALE", "FEMALE", "OTHER")


class EmployeeForm(ApiForm):
    name: str = Field(min_length=1, max_length=100)
    name_eng: Optional[str] = Field(default=None, alias="nameEng", max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, pattern=r"^[\d\-\+\(\)\s]+$")
    department: str = Field(min_length=1, max_length=100)
    position: str = Field(min_length=1, max_length=100)
    rank: Optional[str] = Field(default=None, max_length=50)
    hire_date: date = Field(default_factory=date.today, alias="hireDate")
    birth_date: Optional[date] = Field(default=None, alias="birthDate")
    gender: Optional[Gender] = None
    status: EmployeeStatus = "ACTIVE"
