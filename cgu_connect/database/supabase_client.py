from supabase import create_client, Client
from cgu_connect.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in admin scripts only."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def get_user_client(cls, access_token: str) -> Client:
        """New client acting as the token's user, so row-level security applies.

        The table and storage clients are built lazily from ``options.headers``,
        so the Authorization header must be set before either is touched.
        """
        client = create_client(settings.supabase_url, settings.supabase_key)
        client.options.headers["Authorization"] = f"Bearer {access_token}"
        return client


def get_supabase() -> Client:
    return SupabaseClient.get_client()
