"""Demo users and tasks written on first start when the store is empty."""

import logging
from datetime import datetime, timedelta
from typing import List

from .identity import generate_id
from .schemas import Comment, Role, Task, TaskPriority, TaskStatus, User
from .storage import TASKS, USERS, DocumentStorage

logger = logging.getLogger(__name__)


def default_users() -> List[User]:
    return [
        User(
            id=generate_id(),
            name="Admin User",
            email="admin@example.com",
            role=Role.ADMIN,
            avatar="https://source.unsplash.com/random/100x100/?portrait,1",
        ),
        User(
            id=generate_id(),
            name="John Employee",
            email="john@example.com",
            role=Role.EMPLOYEE,
            avatar="https://source.unsplash.com/random/100x100/?portrait,2",
        ),
        User(
            id=generate_id(),
            name="Jane Employee",
            email="jane@example.com",
            role=Role.EMPLOYEE,
            avatar="https://source.unsplash.com/random/100x100/?portrait,3",
        ),
    ]


def default_tasks(users: List[User], now: datetime) -> List[Task]:
    """Three sample tasks: created by the first user, assigned to the next two."""
    admin, john, jane = users[0], users[1], users[2]
    day = timedelta(days=1)
    return [
        Task(
            id=generate_id(),
            title="Complete project documentation",
            description="Finalize all project documentation for the client handover.",
            status=TaskStatus.PENDING,
            priority=TaskPriority.HIGH,
            assignee_id=john.id,
            assignee_name=john.name,
            created_by_id=admin.id,
            created_by_name=admin.name,
            deadline=now + 2 * day,
            created_at=now,
            updated_at=now,
        ),
        Task(
            id=generate_id(),
            title="Review code changes",
            description="Review and approve the latest code changes for the upcoming release.",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            assignee_id=jane.id,
            assignee_name=jane.name,
            created_by_id=admin.id,
            created_by_name=admin.name,
            deadline=now + day,
            created_at=now - 2 * day,
            updated_at=now - day,
            comments=(
                Comment(
                    id=generate_id(),
                    text="I found some issues with the authentication flow. Please check.",
                    user_id=admin.id,
                    user_name=admin.name,
                    created_at=now - timedelta(hours=12),
                ),
            ),
        ),
        Task(
            id=generate_id(),
            title="Update website content",
            description="Update the company website with new content for the product launch.",
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.LOW,
            assignee_id=john.id,
            assignee_name=john.name,
            created_by_id=admin.id,
            created_by_name=admin.name,
            deadline=now - 3 * day,
            created_at=now - 5 * day,
            updated_at=now - 3 * day,
            comments=(
                Comment(
                    id=generate_id(),
                    text="All content has been updated and reviewed by the marketing team.",
                    user_id=john.id,
                    user_name=john.name,
                    created_at=now - 3 * day,
                ),
            ),
        ),
    ]


def seed_demo_data(storage: DocumentStorage, now: datetime) -> None:
    """Write the default users and tasks into empty collections only."""
    if not storage.get(USERS):
        for user in default_users():
            storage.put(USERS, user.to_record())
        logger.info("Seeded default users")

    users = [User.model_validate(r) for r in storage.get(USERS)]
    if not storage.get(TASKS) and len(users) >= 3:
        for task in default_tasks(users, now):
            storage.put(TASKS, task.to_record())
        logger.info("Seeded default tasks")
