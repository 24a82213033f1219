"""Data access layer for users and transaction records"""

import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_tracker.domain.exceptions import BadRequest, Conflict
from finance_tracker.domain.models import Identity, TransactionKind
from finance_tracker.domain.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from finance_tracker.infrastructure.database.models import Expense, Income, User

PROFILE_FIELDS = ("name", "email", "university", "address")


def as_uuid(value: Union[str, uuid.UUID, None]) -> Optional[uuid.UUID]:
    """Parse an id from a path or token; None when it cannot be a stored id"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively; store and look up one canonical form"""
    return email.strip().lower()


def to_identity(user: User) -> Identity:
    """Project a user row onto the identity handed to request handlers"""
    return Identity(
        id=str(user.id),
        name=user.name,
        email=user.email,
        university=user.university,
        address=user.address,
    )


class UserRepository:
    """Credential store: user identities and their password hashes"""

    def __init__(self, db: Session, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def get_by_id(self, user_id: Union[str, uuid.UUID, None]) -> Optional[User]:
        user_uuid = as_uuid(user_id)
        if user_uuid is None:
            return None
        return self.db.query(User).filter(User.id == user_uuid).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        university: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """
        Persist a new user, hashing the password once.

        Raises:
            Conflict: Email is already registered
        """
        email = normalize_email(email)
        if self.get_by_email(email) is not None:
            raise Conflict("User already exists")

        user = User(name=name, email=email, university=university, address=address)
        self.set_password(user, password)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            raise Conflict("User already exists") from e
        return user

    def set_password(self, user: User, password: str) -> None:
        """The only place a password reaches the user row, and only as a hash"""
        try:
            user.password_hash = hash_password(password, self.bcrypt_rounds)
        except ValueError as e:
            raise BadRequest(str(e)) from e

    def update_profile(self, user: User, changes: Dict[str, Any]) -> User:
        """
        Apply supplied profile fields; password is re-hashed only when supplied.

        Raises:
            Conflict: New email belongs to another user
        """
        if changes.get("email"):
            changes = {**changes, "email": normalize_email(changes["email"])}
        new_email = changes.get("email")
        if new_email and new_email != user.email:
            existing = self.get_by_email(new_email)
            if existing is not None and existing.id != user.id:
                raise Conflict("User already exists")

        for field in PROFILE_FIELDS:
            if field in changes:
                setattr(user, field, changes[field])

        if changes.get("password"):
            self.set_password(user, changes["password"])

        try:
            self.db.flush()
        except IntegrityError as e:
            raise Conflict("User already exists") from e
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials; unknown email and wrong password both give None"""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user


class TransactionRepository:
    """Repository for one kind of transaction record (income or expense)"""

    MODELS: Dict[str, Type[Any]] = {"income": Income, "expense": Expense}

    def __init__(self, db: Session, kind: TransactionKind):
        self.db = db
        self.kind = kind
        self.model = self.MODELS[kind.name]
        self.date_column = getattr(self.model, kind.date_field)

    def list_for_user(self, user_id: str, recurring_only: bool = False) -> List[Any]:
        """Fetch a user's records, newest date first"""
        query = self.db.query(self.model).filter(self.model.user_id == as_uuid(user_id))
        if recurring_only:
            query = query.filter(self.model.is_recurring.is_(True))
        return query.order_by(self.date_column.desc(), self.model.created_at.desc()).all()

    def get_by_id(self, record_id: str) -> Optional[Any]:
        record_uuid = as_uuid(record_id)
        if record_uuid is None:
            return None
        return self.db.query(self.model).filter(self.model.id == record_uuid).first()

    def create(self, user_id: str, fields: Dict[str, Any]) -> Any:
        """Persist a validated record owned by user_id"""
        record = self.model(user_id=as_uuid(user_id), **fields)
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, record: Any, fields: Dict[str, Any]) -> Any:
        for field, value in fields.items():
            setattr(record, field, value)
        self.db.flush()
        return record

    def delete(self, record: Any) -> None:
        self.db.delete(record)
        self.db.flush()

    def totals_for_period(self, user_id: str, start: date, end: date) -> Tuple[float, int]:
        """Sum and count of a user's records dated within [start, end]"""
        total, count = (
            self.db.query(
                func.coalesce(func.sum(self.model.amount), 0.0),
                func.count(self.model.id),
            )
            .filter(self.model.user_id == as_uuid(user_id))
            .filter(self.date_column >= start, self.date_column <= end)
            .one()
        )
        return float(total), int(count)
