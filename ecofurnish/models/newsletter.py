# ecofurnish/models/newsletter.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class NewsletterSubscriber(SQLModel):
    """
    Row of the remote `newsletter_subscribers` table (email is unique).
    """

    email: str
    subscribed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Subscription timestamp (UTC)",
    )
