"""Pydantic schemas for API request/response validation

Bodies use camelCase on the wire (isRecurring, dateSpent, ...); attributes
stay snake_case in Python.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from finance_tracker.domain.models import ExpenseCategory, IncomeCategory, RecurringFrequency
from finance_tracker.domain.passwords import MAX_PASSWORD_BYTES


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _password_fits(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


# --- Auth ---


class RegisterRequest(CamelModel):
    """Request body for POST /api/auth/register"""

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: Optional[str]) -> Optional[str]:
        return _password_fits(value)


class LoginRequest(CamelModel):
    """Request body for POST /api/auth/login"""

    email: str
    password: str


class AuthResponse(CamelModel):
    """Response for register and login"""

    id: str
    name: str
    email: str
    token: str


class ProfileResponse(CamelModel):
    """Response for GET /api/auth/profile"""

    name: str
    email: str
    university: Optional[str] = None
    address: Optional[str] = None


class ProfileUpdateRequest(CamelModel):
    """Request body for PUT /api/auth/profile; only supplied fields change"""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    university: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = Field(None, min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: Optional[str]) -> Optional[str]:
        return _password_fits(value)


class ProfileUpdateResponse(CamelModel):
    """Response for PUT /api/auth/profile, carrying a fresh token"""

    id: str
    name: str
    email: str
    university: Optional[str] = None
    address: Optional[str] = None
    token: str


# --- Transactions ---


class TransactionFields(CamelModel):
    """Fields common to income and expense request bodies

    Everything is optional at the type level: presence, positivity and
    recurring coherence are checked by the recurring-field policy so that
    each violation gets its own message.
    """

    amount: Optional[float] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None
    start_date: Optional[date] = None


class IncomeCreate(TransactionFields):
    """Request body for POST /api/income/addIncome"""

    date_earned: Optional[date] = None
    category: Optional[IncomeCategory] = None
    source: Optional[str] = None


class IncomeUpdate(IncomeCreate):
    """Request body for PUT /api/income/{id}; absent fields are left unchanged"""

    pass


class ExpenseCreate(TransactionFields):
    """Request body for POST /api/expense/addExpense"""

    date_spent: Optional[date] = None
    category: Optional[ExpenseCategory] = None
    merchant: Optional[str] = None


class ExpenseUpdate(ExpenseCreate):
    """Request body for PUT /api/expense/{id}; absent fields are left unchanged"""

    pass


class TransactionRecord(CamelModel):
    """Stored record as returned to its owner"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    amount: float
    description: Optional[str] = None
    category: str
    is_recurring: bool
    recurring_frequency: Optional[str] = None
    start_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class IncomeResponse(TransactionRecord):
    date_earned: date
    source: Optional[str] = None


class ExpenseResponse(TransactionRecord):
    date_spent: date
    merchant: Optional[str] = None


class TransactionSummary(CamelModel):
    """Response for GET /api/{kind}/summary"""

    start_date: date
    end_date: date
    total_amount: float
    count: int


class MessageResponse(BaseModel):
    message: str
