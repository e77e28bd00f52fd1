"""
Create Avatar Bucket Script
Ensures the public storage bucket that holds profile pictures exists.
Needs SUPABASE_SERVICE_ROLE_KEY; run once per Supabase project.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cgu_connect.config import settings
from cgu_connect.core.errors import backend_message
from cgu_connect.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def ensure_avatar_bucket(supabase: Client) -> bool:
    """Create the avatar bucket if missing. Returns True when it was created."""
    bucket_name = settings.avatar_bucket
    existing = [b.id for b in supabase.storage.list_buckets()]
    logger.info(f"Existing buckets: {existing}")

    if bucket_name in existing:
        logger.info(f"Bucket '{bucket_name}' already exists")
        return False

    supabase.storage.create_bucket(
        bucket_name,
        options={
            "public": True,
            "file_size_limit": settings.max_avatar_bytes,
            "allowed_mime_types": ["image/*"],
        },
    )
    logger.info(f"Created public bucket '{bucket_name}'")
    return True


def main():
    if not settings.supabase_service_role_key:
        logger.error("SUPABASE_SERVICE_ROLE_KEY must be set to manage storage buckets")
        sys.exit(1)

    try:
        ensure_avatar_bucket(SupabaseClient.get_service_client())
    except Exception as e:
        logger.error(f"Error creating bucket: {backend_message(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
