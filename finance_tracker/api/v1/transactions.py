"""/api/income and /api/expense - one router factory instantiated per transaction kind"""

from datetime import date
from typing import List, Type

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.schemas import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    IncomeCreate,
    IncomeResponse,
    IncomeUpdate,
    MessageResponse,
    TransactionSummary,
)
from finance_tracker.domain.access import ensure_owner
from finance_tracker.domain.exceptions import BadRequest
from finance_tracker.domain.models import EXPENSE, INCOME, Identity, TransactionKind
from finance_tracker.domain.recurring import apply_transaction_update, updatable_fields, validate_new_transaction
from finance_tracker.infrastructure.database.repositories import TransactionRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_transaction_event
from finance_tracker.infrastructure.observability.metrics import record_transaction_operation


def build_router(
    kind: TransactionKind,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    """
    Build list/read/create/update/delete routes for one transaction kind.

    Every route requires an authenticated user; single-record routes also
    require that user to own the record.
    """
    router = APIRouter()

    def get_repository(db: Session = Depends(get_db)) -> TransactionRepository:
        return TransactionRepository(db, kind)

    def _record_mutation(request: Request, action: str, user_id: str, record_id: str) -> None:
        record_transaction_operation(kind.name, action)
        log_transaction_event(get_request_id(request), kind.name, action, user_id, record_id)

    @router.get("", response_model=List[response_schema], response_model_exclude_none=True)
    def list_records(
        current_user: Identity = Depends(get_current_user),
        repo: TransactionRepository = Depends(get_repository),
    ):
        """All of the caller's records, newest date first"""
        return repo.list_for_user(current_user.id)

    @router.get("/recurring", response_model=List[response_schema], response_model_exclude_none=True)
    def list_recurring_records(
        current_user: Identity = Depends(get_current_user),
        repo: TransactionRepository = Depends(get_repository),
    ):
        return repo.list_for_user(current_user.id, recurring_only=True)

    @router.get("/summary", response_model=TransactionSummary)
    def summarize_records(
        start_date: date = Query(..., alias="startDate"),
        end_date: date = Query(..., alias="endDate"),
        current_user: Identity = Depends(get_current_user),
        repo: TransactionRepository = Depends(get_repository),
    ):
        """Total amount and count of the caller's records dated within [startDate, endDate]"""
        if start_date > end_date:
            raise BadRequest("startDate must not be after endDate")

        total, count = repo.totals_for_period(current_user.id, start_date, end_date)
        return TransactionSummary(start_date=start_date, end_date=end_date, total_amount=total, count=count)

    @router.get("/{record_id}", response_model=response_schema, response_model_exclude_none=True)
    def get_record(
        record_id: str,
        current_user: Identity = Depends(get_current_user),
        repo: TransactionRepository = Depends(get_repository),
    ):
        return ensure_owner(repo.get_by_id(record_id), current_user, kind, "view")

    @router.post(
        f"/add{kind.label}",
        response_model=response_schema,
        response_model_exclude_none=True,
        status_code=status.HTTP_201_CREATED,
    )
    def create_record(
        request_body: create_schema,
        request: Request,
        current_user: Identity = Depends(get_current_user),
        db: Session = Depends(get_db),
        repo: TransactionRepository = Depends(get_repository),
    ):
        """
        Create a record owned by the caller.

        Validation runs before the insert, so a 400 never leaves a partial record.
        """
        fields = validate_new_transaction(kind, request_body.model_dump())
        record = repo.create(current_user.id, fields)
        db.commit()
        db.refresh(record)

        _record_mutation(request, "create", current_user.id, str(record.id))
        return record

    @router.put("/{record_id}", response_model=response_schema, response_model_exclude_none=True)
    def update_record(
        record_id: str,
        request_body: update_schema,
        request: Request,
        current_user: Identity = Depends(get_current_user),
        db: Session = Depends(get_db),
        repo: TransactionRepository = Depends(get_repository),
    ):
        """Partial update; turning isRecurring off clears frequency and start date"""
        record = ensure_owner(repo.get_by_id(record_id), current_user, kind, "update")

        current = {field: getattr(record, field) for field in updatable_fields(kind)}
        fields = apply_transaction_update(kind, current, request_body.model_dump(exclude_unset=True))
        repo.update(record, fields)
        db.commit()
        db.refresh(record)

        _record_mutation(request, "update", current_user.id, record_id)
        return record

    @router.delete("/{record_id}", response_model=MessageResponse)
    def delete_record(
        record_id: str,
        request: Request,
        current_user: Identity = Depends(get_current_user),
        db: Session = Depends(get_db),
        repo: TransactionRepository = Depends(get_repository),
    ):
        record = ensure_owner(repo.get_by_id(record_id), current_user, kind, "delete")
        repo.delete(record)
        db.commit()

        _record_mutation(request, "delete", current_user.id, record_id)
        return MessageResponse(message=f"{kind.label} deleted successfully")

    return router


income_router = build_router(INCOME, IncomeCreate, IncomeUpdate, IncomeResponse)
expense_router = build_router(EXPENSE, ExpenseCreate, ExpenseUpdate, ExpenseResponse)
