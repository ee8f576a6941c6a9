"""
SQLAlchemy models for the task balancer.
Users own members and tasks; every query is scoped by owner_id.
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

MIN_CAPACITY = 0
MAX_CAPACITY = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Priority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Sort key: Low < Medium < High."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}

# Priorities the rebalancer is allowed to move
MOVABLE_PRIORITIES = (Priority.LOW, Priority.MEDIUM)


class Status(str, enum.Enum):
    TODO = "Todo"
    DONE = "Done"


class User(Base):
    """
    Identity provider subject. Owns members and tasks.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(120), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Member(Base):
    """
    Model for team members with a bounded task capacity.
    """
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    name = Column(String(120), nullable=False)
    capacity = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    tasks = relationship("Task", back_populates="member", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(
            f"capacity >= {MIN_CAPACITY} AND capacity <= {MAX_CAPACITY}",
            name="ck_members_capacity_range"
        ),
        Index("ix_members_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, name={self.name}, capacity={self.capacity})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "capacity": self.capacity,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Task(Base):
    """
    Model for tasks, optionally assigned to a member of the same owner.
    """
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    title = Column(String(255), nullable=False)
    assigned_member_id = Column(
        Integer,
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True
    )
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)
    status = Column(String(10), nullable=False, default=Status.TODO.value)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    member = relationship("Member", back_populates="tasks")

    __table_args__ = (
        Index("ix_tasks_owner", "owner_id"),
        Index("ix_tasks_member_status", "assigned_member_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Task(id={self.id}, member={self.assigned_member_id}, "
            f"priority={self.priority}, status={self.status})>"
        )

    @property
    def is_open(self) -> bool:
        return self.status == Status.TODO.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "assigned_member_id": self.assigned_member_id,
            "member_name": self.member.name if self.member else None,
            "member_capacity": self.member.capacity if self.member else None,
            "priority": self.priority,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
