"""
Subscription store for accounts and email signups.

Ships an in-memory implementation (the default, state is lost on restart)
and a SQLAlchemy-backed one for when a DATABASE_URL is configured.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, DateTime, Integer, String, create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubscriptionStore(Protocol):
    """Interface for account and subscription persistence."""

    def create_account(self, username: str, password: str) -> "Account":
        ...

    def get_account(self, account_id: str) -> Optional["Account"]:
        ...

    def get_account_by_username(self, username: str) -> Optional["Account"]:
        ...

    def create_subscription(self, email: str) -> "EmailSubscription":
        ...

    def add_subscription(self, email: str) -> tuple["EmailSubscription", bool]:
        ...

    def get_subscription(self, email: str) -> Optional["EmailSubscription"]:
        ...

    def list_subscriptions(self) -> list["EmailSubscription"]:
        ...


@dataclass
class Account:
    id: str
    username: str
    password: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class EmailSubscription:
    id: str
    email: str
    subscribed_at: datetime = field(default_factory=_utcnow)


class InMemorySubscriptionStore:
    """Dict-backed store. A single lock serializes all reads and writes."""

    def __init__(self):
        self.accounts: Dict[str, Account] = {}
        self.subscriptions: Dict[str, EmailSubscription] = {}
        self._lock = threading.Lock()

    def create_account(self, username: str, password: str) -> Account:
        account = Account(id=uuid.uuid4().hex, username=username, password=password)
        with self._lock:
            self.accounts[account.id] = account
        return account

    def get_account(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self.accounts.get(account_id)

    def get_account_by_username(self, username: str) -> Optional[Account]:
        # Usernames are not unique; the earliest account wins.
        with self._lock:
            for account in self.accounts.values():
                if account.username == username:
                    return account
        return None

    def create_subscription(self, email: str) -> EmailSubscription:
        """Insert a subscription, replacing any existing record for the email."""
        record = EmailSubscription(id=uuid.uuid4().hex, email=email)
        with self._lock:
            self.subscriptions[email] = record
        return record

    def add_subscription(self, email: str) -> tuple[EmailSubscription, bool]:
        """
        Insert a subscription only if the email is not already present.

        Returns the stored record and whether it was created by this call.
        """
        with self._lock:
            existing = self.subscriptions.get(email)
            if existing:
                return existing, False
            record = EmailSubscription(id=uuid.uuid4().hex, email=email)
            self.subscriptions[email] = record
            return record, True

    def get_subscription(self, email: str) -> Optional[EmailSubscription]:
        with self._lock:
            return self.subscriptions.get(email)

    def list_subscriptions(self) -> list[EmailSubscription]:
        with self._lock:
            return list(self.subscriptions.values())

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.accounts.clear()
            self.subscriptions.clear()


class SqlSubscriptionStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlSubscriptionStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_account(self, row: "AccountRow") -> Account:
        return Account(
            id=row.id,
            username=row.username,
            password=row.password,
            created_at=_as_utc(row.created_at),
        )

    def _to_subscription(self, row: "SubscriptionRow") -> EmailSubscription:
        return EmailSubscription(
            id=row.id,
            email=row.email,
            subscribed_at=_as_utc(row.subscribed_at),
        )

    def create_account(self, username: str, password: str) -> Account:
        with self.Session() as session:
            row = AccountRow(
                id=uuid.uuid4().hex,
                username=username,
                password=password,
                created_at=_utcnow(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_account(row)

    def get_account(self, account_id: str) -> Optional[Account]:
        with self.Session() as session:
            row = session.execute(
                select(AccountRow).where(AccountRow.id == account_id)
            ).scalar_one_or_none()
            if not row:
                return None
            return self._to_account(row)

    def get_account_by_username(self, username: str) -> Optional[Account]:
        with self.Session() as session:
            stmt = (
                select(AccountRow)
                .where(AccountRow.username == username)
                .order_by(AccountRow.seq.asc())
                .limit(1)
            )
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return self._to_account(row)

    def create_subscription(self, email: str) -> EmailSubscription:
        with self.Session() as session:
            existing = session.execute(
                select(SubscriptionRow).where(SubscriptionRow.email == email)
            ).scalar_one_or_none()
            if existing:
                session.delete(existing)
                session.flush()
            row = SubscriptionRow(
                id=uuid.uuid4().hex, email=email, subscribed_at=_utcnow()
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_subscription(row)

    def add_subscription(self, email: str) -> tuple[EmailSubscription, bool]:
        with self.Session() as session:
            row = SubscriptionRow(
                id=uuid.uuid4().hex, email=email, subscribed_at=_utcnow()
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
            else:
                session.refresh(row)
                return self._to_subscription(row), True

        existing = self.get_subscription(email)
        if existing is None:
            # Unique violation on something other than the email.
            raise RuntimeError(f"Could not insert subscription for {email!r}")
        return existing, False

    def get_subscription(self, email: str) -> Optional[EmailSubscription]:
        with self.Session() as session:
            row = session.execute(
                select(SubscriptionRow).where(SubscriptionRow.email == email)
            ).scalar_one_or_none()
            if not row:
                return None
            return self._to_subscription(row)

    def list_subscriptions(self) -> list[EmailSubscription]:
        with self.Session() as session:
            rows = (
                session.execute(
                    select(SubscriptionRow).order_by(SubscriptionRow.seq.asc())
                )
                .scalars()
                .all()
            )
            return [self._to_subscription(row) for row in rows]


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on round trip.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


Base = declarative_base()


class AccountRow(Base):
    __tablename__ = "accounts"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True, index=True)
    username = Column(String, nullable=False, index=True)
    password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class SubscriptionRow(Base):
    __tablename__ = "email_subscriptions"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    email = Column(String, nullable=False, unique=True, index=True)
    subscribed_at = Column(DateTime(timezone=True), nullable=False)
