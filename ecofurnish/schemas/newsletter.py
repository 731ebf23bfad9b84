# ecofurnish/schemas/newsletter.py
from typing import Literal

from pydantic import EmailStr, ConfigDict
from sqlmodel import SQLModel


class NewsletterSubscribe(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class NewsletterResult(SQLModel):
    """
    `already_subscribed` is informational, not an error.
    """

    status: Literal["subscribed", "already_subscribed"]
    message: str
