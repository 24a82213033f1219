"""Domain models - pure Python dataclasses and enums representing business entities"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type


class IncomeCategory(str, Enum):
    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENT = "Investment"
    BUSINESS = "Business"
    GIFT = "Gift"
    OTHER = "Other"


class ExpenseCategory(str, Enum):
    HOUSING = "Housing"
    TRANSPORTATION = "Transportation"
    FOOD = "Food"
    HEALTHCARE = "Healthcare"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    OTHER = "Other"


class RecurringFrequency(str, Enum):
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"


@dataclass(frozen=True)
class Identity:
    """Authenticated user as seen by request handlers (never carries the password hash)"""

    id: str
    name: str
    email: str
    university: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class TransactionKind:
    """Describes one transaction resource (income or expense)

    Both resources share the same recurring-field policy and ownership rules;
    they differ only in these names.
    """

    name: str  # "income" | "expense"
    label: str  # "Income" | "Expense", used in response messages
    date_field: str  # attribute holding the transaction date
    counterparty_field: str  # "source" | "merchant"
    category_enum: Type[Enum]


INCOME = TransactionKind(
    name="income",
    label="Income",
    date_field="date_earned",
    counterparty_field="source",
    category_enum=IncomeCategory,
)

EXPENSE = TransactionKind(
    name="expense",
    label="Expense",
    date_field="date_spent",
    counterparty_field="merchant",
    category_enum=ExpenseCategory,
)
