# ecofurnish/repositories/user_repo.py
from supabase import AsyncClient

from ecofurnish.models.user import Profile


class ProfileRepository:
    """
    Data access layer for the `profiles` table.

    Responsibilities:
      - Pure row operations through the Supabase table API
      - No FastAPI, no HTTP, no business logic
      - Backend errors propagate to the caller
    """

    TABLE = "profiles"

    def __init__(self, client: AsyncClient):
        self.client = client

    async def get_by_id(self, user_id: str) -> Profile | None:
        """Return the profile row for a user, or None if not found."""
        response = await (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return Profile.model_validate(response.data[0])

    async def create(self, profile: Profile) -> None:
        """
        Insert a profile row.

        Keyed on id and ignoring duplicates, so two near-simultaneous
        first logins of the same user cannot fail on each other.
        """
        await (
            self.client.table(self.TABLE)
            .upsert(
                profile.model_dump(exclude_none=True),
                on_conflict="id",
                ignore_duplicates=True,
            )
            .execute()
        )
