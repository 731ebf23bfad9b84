# ecofurnish/models/user.py
from sqlmodel import SQLModel, Field


class Profile(SQLModel):
    """
    Row of the remote `profiles` table.

    Identity:
      - id: MUST match Supabase auth.users.id

    This table is *not* responsible for credentials. Supabase Auth
    stores them in its own schema. We only mirror identity,
    display name and avatar.
    """

    id: str = Field(description="Matches Supabase auth.users.id")
    email: str | None = None
    name: str | None = Field(
        default=None,
        description="Display name; may be empty until the visitor sets one",
    )
    avatar_url: str | None = None


class User(SQLModel):
    """
    The signed-in visitor as seen by the storefront.

    Built from a Profile row (or from auth metadata when the row is
    missing) and replaced wholesale on every auth event.
    """

    id: str
    email: str = ""
    name: str
    avatar_url: str | None = None
