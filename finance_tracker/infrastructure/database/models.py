"""SQLAlchemy ORM models for users, incomes and expenses"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, declared_attr, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class User(Base):
    """Registered account; password_hash is never serialized"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(60), nullable=False)
    university = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    incomes = relationship("Income", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")


class TransactionMixin:
    """Columns shared by income and expense records"""

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(32), nullable=False, default="Other")
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String(16), nullable=True)
    start_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    @declared_attr
    def user_id(cls):
        return Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class Income(TransactionMixin, Base):
    """Money earned by a user"""

    __tablename__ = "incomes"

    date_earned = Column(Date, nullable=False, index=True)
    source = Column(Text, nullable=True)

    user = relationship("User", back_populates="incomes")


class Expense(TransactionMixin, Base):
    """Money spent by a user"""

    __tablename__ = "expenses"

    date_spent = Column(Date, nullable=False, index=True)
    merchant = Column(Text, nullable=True)

    user = relationship("User", back_populates="expenses")
