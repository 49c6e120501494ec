"""
Notification events handed to the external Notification Sink.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

NotificationType = Literal["FORK_VOTED", "RECIPE_FORKED"]


class NotificationEvent(BaseModel):
    """A fire-and-forget event addressed to one user.

    Attributes:
        user_id: Recipient.
        type: Event kind.
        title: Short headline.
        message: Display sentence.
        data: Structured payload (recipe ids, titles).
        created_at: UTC creation time.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = {}
    created_at: datetime

    @field_validator("message")
    @classmethod
    def validate_message_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("message must not be empty.")
        return v.strip()
