import os
import uuid
import logging
from fastapi import UploadFile, HTTPException
import shutil
from animez.core import settings

logger = logging.getLogger(__name__)


class FileUploadService:
    def __init__(self, upload_dir: str = None):
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        self.extensions = settings.IMAGE_EXTENSIONS
        self.allowed_types = settings.ALLOWED_IMAGE_TYPES
        self.max_size = settings.MAX_FILE_SIZE

        # Create upload directory if it doesn't exist
        os.makedirs(self.upload_dir, exist_ok=True)

    async def upload_avatar(self, file: UploadFile, user_id: str) -> str:
        """Upload user avatar"""
        return await self._upload_image(file, "avatars", user_id)

    async def upload_post_media(self, file: UploadFile, user_id: str) -> str:
        """Upload an image or gif attached to a post"""
        return await self._upload_image(file, "post-media", user_id)

    async def _upload_image(self, file: UploadFile, category: str, owner_id: str) -> str:
        """Generic image upload method"""
        # Validate file type
        if file.content_type not in self.allowed_types:
            raise HTTPException(
                status_code=400,
                detail=f"File type not allowed. Allowed types: {', '.join(self.allowed_types)}"
            )

        # Validate file size
        file.file.seek(0, 2)  # Seek to end
        file_size = file.file.tell()
        file.file.seek(0)  # Seek back to start

        if file_size > self.max_size:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Maximum size: {self.max_size // (1024 * 1024)}MB"
            )

        # Generate unique filename; the client's name is ignored
        filename = f"{owner_id}_{uuid.uuid4().hex}.{self.extensions[file.content_type]}"
        file_path = os.path.join(self.upload_dir, category, filename)

        # Create category directory if it doesn't exist
        os.makedirs(os.path.dirname(file_path), exist_ok=True)

        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        logger.info("Stored %s upload %s (%d bytes)", category, filename, file_size)
        return f"/uploads/{category}/{filename}"

    def _local_path(self, file_url: str):
        """Filesystem path for an /uploads/ URL, or None if it points outside the upload dir."""
        if not file_url or not file_url.startswith('/uploads/'):
            return None
        root = os.path.realpath(self.upload_dir)
        file_path = os.path.realpath(os.path.join(root, file_url[len('/uploads/'):]))
        if os.path.commonpath([root, file_path]) != root or file_path == root:
            logger.warning("Refusing to touch %s outside the upload directory", file_url)
            return None
        return file_path

    async def delete_file(self, file_url: str) -> bool:
        """Delete a previously uploaded file"""
        file_path = self._local_path(file_url)
        if file_path is None:
            return False
        try:
            if os.path.isfile(file_path):
                os.remove(file_path)
                return True
        except OSError as e:
            logger.error(f"Error deleting upload {file_path}: {e}")
        return False

    async def delete_avatar(self, avatar_url: str, user_id: str) -> bool:
        """Delete an avatar this service stored for the user"""
        prefix = "/uploads/avatars/"
        if not (avatar_url or "").startswith(prefix):
            return False
        name = avatar_url[len(prefix):]
        if "/" in name or not name.startswith(f"{user_id}_"):
            return False
        return await self.delete_file(avatar_url)


# Global instance
file_upload_service = FileUploadService()
