"""Unit tests for the recurring-field policy"""

import pytest
from datetime import date
from finance_tracker.domain.exceptions import BadRequest
from finance_tracker.domain.models import EXPENSE, INCOME, ExpenseCategory, RecurringFrequency
from finance_tracker.domain.recurring import apply_transaction_update, validate_new_transaction


def expense(**overrides):
    data = {"amount": 50, "description": "Groceries", "category": "Food", "merchant": "Store"}
    data.update(overrides)
    return data


def recurring_income_record(**overrides):
    record = {
        "amount": 3000.0,
        "date_earned": date(2024, 1, 31),
        "description": "Salary",
        "category": "Salary",
        "source": "Employer",
        "is_recurring": True,
        "recurring_frequency": "Monthly",
        "start_date": date(2024, 1, 1),
    }
    record.update(overrides)
    return record


# --- create ---


def test_create_defaults_to_one_off_without_recurring_fields():
    fields = validate_new_transaction(EXPENSE, expense())

    assert fields["is_recurring"] is False
    assert fields["recurring_frequency"] is None
    assert fields["start_date"] is None
    assert fields["date_spent"] == date.today()


def test_create_keeps_supplied_date_and_plain_enum_values():
    fields = validate_new_transaction(
        EXPENSE,
        expense(category=ExpenseCategory.FOOD, date_spent=date(2024, 3, 2)),
    )

    assert fields["category"] == "Food"
    assert fields["date_spent"] == date(2024, 3, 2)


def test_create_names_every_missing_field():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(EXPENSE, {"amount": 10})

    assert str(exc.value) == "Missing required fields: description, category, merchant"


def test_create_uses_counterparty_field_of_kind():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(INCOME, {"amount": 10, "description": "Gig", "category": "Freelance"})

    assert str(exc.value) == "Missing required fields: source"


def test_create_treats_blank_strings_as_missing():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(EXPENSE, expense(description="   "))

    assert "description" in str(exc.value)


@pytest.mark.parametrize("amount", [-5, 0])
def test_create_rejects_non_positive_amount(amount):
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(EXPENSE, expense(amount=amount))

    assert str(exc.value) == "Amount must be greater than 0"


def test_missing_fields_reported_before_amount():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(EXPENSE, {"amount": -1, "description": "x", "category": "Food"})

    assert str(exc.value).startswith("Missing required fields")


def test_recurring_requires_frequency_before_start_date():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(EXPENSE, expense(is_recurring=True))

    assert str(exc.value) == "Recurring frequency is required for recurring expense"


def test_recurring_requires_start_date():
    with pytest.raises(BadRequest) as exc:
        validate_new_transaction(
            INCOME,
            {
                "amount": 100,
                "description": "Rent from tenant",
                "category": "Business",
                "source": "Tenant",
                "is_recurring": True,
                "recurring_frequency": RecurringFrequency.MONTHLY,
            },
        )

    assert str(exc.value) == "Start date is required for recurring income"


def test_recurring_fields_dropped_for_one_off_record():
    fields = validate_new_transaction(
        EXPENSE,
        expense(is_recurring=False, recurring_frequency="Weekly", start_date=date(2024, 1, 1)),
    )

    assert fields["recurring_frequency"] is None
    assert fields["start_date"] is None


def test_recurring_create_keeps_both_fields():
    fields = validate_new_transaction(
        EXPENSE,
        expense(is_recurring=True, recurring_frequency=RecurringFrequency.WEEKLY, start_date=date(2024, 1, 1)),
    )

    assert fields["is_recurring"] is True
    assert fields["recurring_frequency"] == "Weekly"
    assert fields["start_date"] == date(2024, 1, 1)


# --- update ---


def test_update_turning_recurring_off_clears_fields_even_if_supplied():
    merged = apply_transaction_update(
        INCOME,
        recurring_income_record(),
        {"is_recurring": False, "recurring_frequency": "Weekly", "start_date": date(2024, 5, 1)},
    )

    assert merged["is_recurring"] is False
    assert merged["recurring_frequency"] is None
    assert merged["start_date"] is None


def test_update_leaves_absent_fields_unchanged():
    merged = apply_transaction_update(INCOME, recurring_income_record(), {"amount": 3200})

    assert merged["amount"] == 3200
    assert merged["description"] == "Salary"
    assert merged["recurring_frequency"] == "Monthly"
    assert merged["start_date"] == date(2024, 1, 1)


def test_update_overwrites_with_falsy_values():
    merged = apply_transaction_update(INCOME, recurring_income_record(), {"description": "", "source": None})

    assert merged["description"] == ""
    assert merged["source"] is None


def test_update_checks_amount_only_when_supplied():
    current = recurring_income_record(amount=10.0)
    assert apply_transaction_update(INCOME, current, {"description": "x"})["amount"] == 10.0

    with pytest.raises(BadRequest, match="Amount must be greater than 0"):
        apply_transaction_update(INCOME, current, {"amount": 0})

    with pytest.raises(BadRequest, match="Amount must be greater than 0"):
        apply_transaction_update(INCOME, current, {"amount": None})


@pytest.mark.parametrize("field, wire", [("category", "category"), ("date_earned", "dateEarned"), ("is_recurring", "isRecurring")])
def test_update_rejects_null_on_required_fields(field, wire):
    with pytest.raises(BadRequest) as exc:
        apply_transaction_update(INCOME, recurring_income_record(), {field: None})

    assert str(exc.value) == f"{wire} cannot be null"


def test_update_turning_recurring_on_requires_frequency():
    one_off = recurring_income_record(is_recurring=False, recurring_frequency=None, start_date=None)

    with pytest.raises(BadRequest, match="Recurring frequency is required for recurring income"):
        apply_transaction_update(INCOME, one_off, {"is_recurring": True})

    with pytest.raises(BadRequest, match="Start date is required for recurring income"):
        apply_transaction_update(INCOME, one_off, {"is_recurring": True, "recurring_frequency": "Weekly"})


def test_update_clearing_frequency_of_recurring_record_is_rejected():
    with pytest.raises(BadRequest, match="Recurring frequency is required"):
        apply_transaction_update(INCOME, recurring_income_record(), {"recurring_frequency": None})


def test_update_ignores_fields_outside_record():
    merged = apply_transaction_update(INCOME, recurring_income_record(), {"user_id": "someone-else"})

    assert "user_id" not in merged
