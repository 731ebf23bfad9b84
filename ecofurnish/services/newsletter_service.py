# ecofurnish/services/newsletter_service.py
import logging
from typing import Literal

from ecofurnish.core.errors import is_unique_violation
from ecofurnish.models.newsletter import NewsletterSubscriber
from ecofurnish.repositories.newsletter_repo import NewsletterRepository

logger = logging.getLogger(__name__)

SubscribeResult = Literal["subscribed", "already_subscribed"]


class NewsletterService:
    """
    Newsletter sign-up with graceful degradation.

    A repeat sign-up is reported as informational; any other backend
    failure is logged and still shown to the visitor as a success.
    """

    def __init__(self, repo: NewsletterRepository | None, *, enabled: bool = True):
        self.repo = repo
        self.enabled = enabled and repo is not None

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    async def subscribe(self, email: str) -> SubscribeResult:
        email = self.normalize_email(email)

        if not self.enabled:
            logger.info("Supabase not configured, newsletter sign-up not stored")
            return "subscribed"

        try:
            await self.repo.create(NewsletterSubscriber(email=email))
        except Exception as e:
            if is_unique_violation(e):
                logger.info(f"Newsletter: {email} already subscribed")
                return "already_subscribed"
            logger.error(f"Newsletter subscription error: {e}")
            return "subscribed"

        logger.info(f"Newsletter: subscribed {email}")
        return "subscribed"
