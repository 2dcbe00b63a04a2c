from datetime import datetime, timezone
from enum import Enum
from typing import Any


class UserPlan(str, Enum):
    """Subscription plans."""
    FREE = "free"
    PRO = "pro"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user_document(
    email: str,
    hashed_password: str,
    name: str | None = None,
    plan: UserPlan = UserPlan.FREE,
) -> dict[str, Any]:
    """Create a user document for MongoDB insertion."""
    now = datetime.now(timezone.utc)
    return {
        "email": normalize_email(email),
        "hashed_password": hashed_password,
        "name": name.strip() if name else None,
        "image": None,
        "plan": plan.value,
        "search_count": 0,
        "created_at": now,
        "updated_at": now,
    }
