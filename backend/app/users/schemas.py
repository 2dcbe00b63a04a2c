from typing import Any

from pydantic import BaseModel

from app.users.model import UserPlan


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    image: str | None = None
    plan: str = UserPlan.FREE.value
    search_count: int = 0

    class Config:
        from_attributes = True

    @classmethod
    def from_document(cls, user: dict[str, Any]) -> "UserResponse":
        return cls(
            id=str(user["_id"]),
            email=user["email"],
            name=user.get("name"),
            image=user.get("image"),
            plan=user.get("plan", UserPlan.FREE.value),
            search_count=user.get("search_count", 0),
        )


class SessionResponse(BaseModel):
    user: UserResponse | None = None
