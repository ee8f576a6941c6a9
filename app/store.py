"""
Record store for members and tasks.

Thin owner-scoped data access over a SQLAlchemy session. Every query
filters on owner_id, so records of one user are never visible to or
mutated by another. Driver failures are rolled back and surfaced as
StoreError with the driver message passed through.
"""
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFound, StoreError
from app.logger import get_logger
from app.models import Member, Priority, Status, Task, User
from app.workload import count_open_tasks

logger = get_logger(__name__)

_PRIORITY_ORDER = case(
    {p.value: p.rank for p in Priority},
    value=Task.priority,
    else_=len(Priority),
)


class RecordStore:
    """
    Owner-scoped access to users, members and tasks.

    Mutations commit immediately; each one is an independent durable write.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error(f"Store failure while trying to {action}: {message}")
            raise StoreError(message) from e

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, username: str, hashed_password: str) -> User:
        with self._guard("create user"):
            user = User(username=username, hashed_password=hashed_password)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        with self._guard("load user"):
            return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._guard("load user"):
            return self.db.query(User).filter(User.username == username).first()

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def list_members(self, owner_id: int) -> List[Member]:
        """Members of an owner in registration order."""
        with self._guard("list members"):
            return (
                self.db.query(Member)
                .filter(Member.owner_id == owner_id)
                .order_by(Member.created_at.asc(), Member.id.asc())
                .all()
            )

    def get_member(self, owner_id: int, member_id: int) -> Member:
        with self._guard("load member"):
            member = (
                self.db.query(Member)
                .filter(Member.id == member_id, Member.owner_id == owner_id)
                .first()
            )
        if member is None:
            raise NotFound("Member not found")
        return member

    def create_member(self, owner_id: int, name: str, capacity: int) -> Member:
        with self._guard("create member"):
            member = Member(owner_id=owner_id, name=name, capacity=capacity)
            self.db.add(member)
            self.db.commit()
            self.db.refresh(member)
            return member

    def delete_member(self, owner_id: int, member_id: int) -> int:
        """
        Delete a member and unassign its tasks.

        Returns:
            Number of tasks that were unassigned
        """
        member = self.get_member(owner_id, member_id)
        with self._guard("delete member"):
            unassigned = (
                self.db.query(Task)
                .filter(Task.owner_id == owner_id, Task.assigned_member_id == member.id)
                .update({Task.assigned_member_id: None}, synchronize_session="fetch")
            )
            self.db.delete(member)
            self.db.commit()
        return unassigned

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def count_todo_tasks(self, owner_id: int, member_id: int) -> int:
        tasks = self.list_tasks(owner_id, status=Status.TODO, member_id=member_id)
        return count_open_tasks(tasks, member_id)

    def list_todo_tasks_by_member(
        self,
        owner_id: int,
        member_id: int,
        priority_in: Iterable[Priority],
    ) -> List[Task]:
        """Open tasks of a member, lowest priority first, then oldest first."""
        priorities = [Priority(p).value for p in priority_in]
        with self._guard("list open tasks"):
            return (
                self.db.query(Task)
                .filter(
                    Task.owner_id == owner_id,
                    Task.assigned_member_id == member_id,
                    Task.status == Status.TODO.value,
                    Task.priority.in_(priorities),
                )
                .order_by(_PRIORITY_ORDER.asc(), Task.created_at.asc(), Task.id.asc())
                .all()
            )

    def list_tasks(
        self,
        owner_id: int,
        status: Optional[Status] = None,
        member_id: Optional[int] = None,
    ) -> List[Task]:
        """All tasks of an owner, newest first."""
        with self._guard("list tasks"):
            query = self.db.query(Task).filter(Task.owner_id == owner_id)
            if status is not None:
                query = query.filter(Task.status == Status(status).value)
            if member_id is not None:
                query = query.filter(Task.assigned_member_id == member_id)
            return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def count_tasks(self, owner_id: int, status: Optional[Status] = None) -> int:
        with self._guard("count tasks"):
            query = self.db.query(func.count(Task.id)).filter(Task.owner_id == owner_id)
            if status is not None:
                query = query.filter(Task.status == Status(status).value)
            return query.scalar() or 0

    def get_task(self, owner_id: int, task_id: int) -> Task:
        with self._guard("load task"):
            task = (
                self.db.query(Task)
                .filter(Task.id == task_id, Task.owner_id == owner_id)
                .first()
            )
        if task is None:
            raise NotFound("Task not found")
        return task

    def create_task(
        self,
        owner_id: int,
        title: str,
        member_id: Optional[int] = None,
        priority: Priority = Priority.MEDIUM,
        status: Status = Status.TODO,
    ) -> Task:
        if member_id is not None:
            self.get_member(owner_id, member_id)
        with self._guard("create task"):
            task = Task(
                owner_id=owner_id,
                title=title,
                assigned_member_id=member_id,
                priority=Priority(priority).value,
                status=Status(status).value,
            )
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
            return task

    def update_task(self, owner_id: int, task_id: int, **changes) -> Task:
        """
        Update title, assigned_member_id, priority and/or status of a task.
        """
        task = self.get_task(owner_id, task_id)
        if changes.get("assigned_member_id") is not None:
            self.get_member(owner_id, changes["assigned_member_id"])
        with self._guard("update task"):
            if "title" in changes:
                task.title = changes["title"]
            if "assigned_member_id" in changes:
                task.assigned_member_id = changes["assigned_member_id"]
            if "priority" in changes:
                task.priority = Priority(changes["priority"]).value
            if "status" in changes:
                task.status = Status(changes["status"]).value
            self.db.commit()
            self.db.refresh(task)
            return task

    def update_task_assignment(
        self,
        task_id: int,
        owner_id: int,
        new_member_id: Optional[int],
    ) -> Task:
        """Point a task at another member of the same owner and commit."""
        return self.update_task(owner_id, task_id, assigned_member_id=new_member_id)

    def delete_task(self, owner_id: int, task_id: int) -> None:
        task = self.get_task(owner_id, task_id)
        with self._guard("delete task"):
            self.db.delete(task)
            self.db.commit()
