# ecofurnish/repositories/newsletter_repo.py
from supabase import AsyncClient

from ecofurnish.models.newsletter import NewsletterSubscriber


class NewsletterRepository:

    TABLE = "newsletter_subscribers"

    def __init__(self, client: AsyncClient):
        self.client = client

    async def create(self, subscriber: NewsletterSubscriber) -> None:
        """Insert a subscriber; a duplicate email raises the PostgREST APIError."""
        await (
            self.client.table(self.TABLE)
            .insert(subscriber.model_dump(mode="json"))
            .execute()
        )
