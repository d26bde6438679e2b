import logging
import os
import uuid
from typing import Optional

from flask import current_app, request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from store_api.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
URL_PREFIX = "/uploads"


class ImageStore:
    """Stores uploaded images on disk and hands back their public path."""

    def __init__(self, upload_folder: str):
        self.upload_folder = upload_folder

    def save(self, file: Optional[FileStorage], folder: str) -> Optional[str]:
        """Persist an uploaded image and return its relative URL path.

        Returns None when no file was sent with the request.
        """
        if file is None or not file.filename:
            return None

        filename = secure_filename(file.filename)
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_EXTENSIONS or not (file.mimetype or "").startswith("image/"):
            raise ValidationError(
                "Only image files are allowed",
                errors={"image": ["Only image files are allowed"]},
            )

        stored_name = f"{uuid.uuid4().hex}_{filename}"
        dest_dir = os.path.join(self.upload_folder, folder)
        os.makedirs(dest_dir, exist_ok=True)
        file.save(os.path.join(dest_dir, stored_name))

        logger.info("Image stored: folder=%s file=%s", folder, stored_name)
        return f"{URL_PREFIX}/{folder}/{stored_name}"


def absolute_url(path: Optional[str]) -> Optional[str]:
    """Rewrite a stored relative path into an absolute URL."""
    if not path or path.startswith(("http://", "https://")):
        return path

    base = current_app.config.get("PUBLIC_BASE_URL") or request.host_url
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
