# emprende/storage.py
"""Image uploads to an S3-compatible bucket.

Validation (type allow-list, size ceiling) runs before anything is sent.
"""
import random
import re
import string

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import StorageConfig, get_settings
from .utils import logger, now_ms

ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp", "image/gif": "gif"}
MAX_SIZE = 2 * 1024 * 1024  # 2MB
CACHE_CONTROL = "max-age=3600"
_EXTENSION = re.compile(r"[a-z0-9]{1,10}")


class StorageError(Exception):
    pass


def validate_image(content_type: str | None, size: int) -> None:
    if content_type not in ALLOWED_TYPES:
        raise ValueError("Tipo de archivo no permitido. Usá JPG, PNG, WEBP o GIF.")
    if size > MAX_SIZE:
        raise ValueError("La imagen es muy grande. Máximo 2MB.")


def build_file_name(original_name: str | None, content_type: str | None = None) -> str:
    """`<epoch ms>-<6 random chars>.<ext>`.

    The extension comes from the uploaded name when it is plain alphanumeric,
    otherwise from the content type.
    """
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    name = original_name or ""
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if not _EXTENSION.fullmatch(extension):
        extension = EXTENSIONS.get(content_type, "bin")
    return f"{now_ms()}-{suffix}.{extension}"


class S3ImageStorage:
    """Uploads objects to one bucket and hands back their public URL."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self._client = None

    @property
    def client(self):
        # created lazily so importing the app never needs credentials
        if self._client is None:
            session = boto3.Session(
                region_name=self.config.region,
                aws_access_key_id=self.config.access_key_id,
                aws_secret_access_key=self.config.secret_access_key,
            )
            self._client = session.client("s3", endpoint_url=self.config.endpoint_url)
        return self._client

    def public_url(self, key: str) -> str:
        return f"{self.config.public_url}/{key}"

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Upload of %s failed: %s", key, e)
            raise StorageError(str(e)) from e
        logger.info("Uploaded %s (%d bytes)", key, len(data))
        return self.public_url(key)


_storage = None

def get_storage() -> S3ImageStorage:
    global _storage
    if _storage is None:
        _storage = S3ImageStorage(get_settings().storage)
    return _storage
