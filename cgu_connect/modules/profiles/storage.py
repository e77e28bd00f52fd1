import logging
import uuid
from typing import List, Tuple
from fastapi import HTTPException
from supabase import Client
from cgu_connect.config import settings
from cgu_connect.core.errors import backend_message

logger = logging.getLogger(__name__)


class AvatarStorage:
    """Profile pictures in the public Supabase storage bucket"""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.bucket_name = settings.avatar_bucket

    @staticmethod
    def validate(content_type: str, size: int) -> Tuple[bool, List[str]]:
        """
        Validate an avatar before it is uploaded.
        Returns (is_valid, list_of_errors)
        """
        if not content_type or not content_type.startswith("image/"):
            return False, ["Please upload an image file"]
        if size > settings.max_avatar_bytes:
            return False, [f"Image must be less than {settings.max_avatar_bytes // (1024 * 1024)}MB"]
        return True, []

    @staticmethod
    def build_path(user_id: str, filename: str, content_type: str) -> str:
        if filename and "." in filename:
            ext = filename.rsplit(".", 1)[-1].lower()
        else:
            ext = content_type.split("/", 1)[-1].split("+", 1)[0]
        return f"{settings.avatar_folder}/{user_id}-{uuid.uuid4().hex[:13]}.{ext}"

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload file to the bucket and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket_name)
        try:
            bucket.upload(path=key, file=file_content, file_options={"content-type": content_type})
        except Exception as e:
            logger.error(f"Failed to upload {key} to {self.bucket_name}: {backend_message(e)}")
            raise HTTPException(status_code=500, detail=backend_message(e))

        public_url = bucket.get_public_url(key)
        if not public_url:
            raise HTTPException(status_code=500, detail="Failed to get public URL for uploaded image")
        return public_url
