"""
Seed a demo user with members and tasks.

Creates an unbalanced team so that /api/balancing/reassign has work to do.

Usage:
    python seed_sample_data.py [--username demo] [--password demo*123]
"""
import argparse

from dotenv import load_dotenv

from app.db import get_db_session, init_db
from app.logger import get_logger, setup_logging
from app.models import Priority, Status
from app.store import RecordStore
from auth.security import hash_password

logger = get_logger(__name__)

MEMBERS = [
    ("Avery", 2),
    ("Blake", 3),
    ("Casey", 3),
    ("Drew", 1),
]

# (title, member index or None, priority, status)
TASKS = [
    ("Draft onboarding checklist", 0, Priority.LOW, Status.TODO),
    ("Tidy shared drive folders", 0, Priority.LOW, Status.TODO),
    ("Update team wiki page", 0, Priority.MEDIUM, Status.TODO),
    ("Fix login page redirect", 0, Priority.HIGH, Status.TODO),
    ("Write weekly status summary", 0, Priority.MEDIUM, Status.DONE),
    ("Set up build notifications", 3, Priority.MEDIUM, Status.TODO),
    ("Renew test certificates", 3, Priority.LOW, Status.TODO),
    ("Plan quarterly retrospective", None, Priority.LOW, Status.TODO),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--username", default="demo")
    parser.add_argument("--password", default="demo*123")
    args = parser.parse_args()

    load_dotenv()
    setup_logging()
    init_db()

    with get_db_session() as db:
        store = RecordStore(db)
        if store.get_user_by_username(args.username):
            raise SystemExit(f"User '{args.username}' already exists")

        user = store.create_user(args.username, hash_password(args.password))
        members = [store.create_member(user.id, name, capacity) for name, capacity in MEMBERS]

        for title, member_index, priority, status in TASKS:
            member_id = members[member_index].id if member_index is not None else None
            store.create_task(user.id, title, member_id, priority, status)

        logger.info(
            f"Seeded user '{user.username}' with {len(members)} members and {len(TASKS)} tasks"
        )


if __name__ == "__main__":
    main()
