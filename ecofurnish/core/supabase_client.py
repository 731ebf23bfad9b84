# ecofurnish/core/supabase_client.py
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from ecofurnish.core.config import Settings, get_settings


async def create_supabase(
    settings: Settings | None = None,
    *,
    pkce: bool = False,
) -> AsyncClient:
    """
    Create an async Supabase client with the anon/public key.

    Use cases:
      - one client per browser session (pkce=True): the auth half of the
        client holds that visitor's tokens, refresh timer and listeners,
        so it must never be shared between visitors
      - one shared client for anonymous writes (newsletter sign-ups)

    Note: This client respects RLS.
    """
    settings = settings or get_settings()
    options = AsyncClientOptions(flow_type="pkce") if pkce else None
    return await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY, options=options)
