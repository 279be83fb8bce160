"""Blob storage services for image and profile picture bytes.

Two interchangeable backends implement the same put/delete/exists contract:
- LocalStorageService: files under settings.upload_dir (default, development)
- S3StorageService: S3-compatible object storage via aioboto3 (MinIO/R2/AWS S3)
"""

from contextlib import asynccontextmanager, suppress
from pathlib import PurePosixPath
from typing import Any, AsyncIterator, Protocol

import aioboto3
import anyio
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from guideforge.config import settings
from guideforge.services.exceptions import NotFoundError, StorageError

logger = structlog.get_logger(__name__)


class BlobNotFoundError(NotFoundError):
    """No blob stored at the given path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Blob not found: {path}")


class BlobStoreError(StorageError):
    """Blob store failed for a reason other than a missing object."""

    def __init__(self, operation: str, path: str, detail: str | None = None):
        self.path = path
        super().__init__("blob", operation, detail=f"{path} ({detail})" if detail else path)


class BlobStore(Protocol):
    """Contract the services rely on; paths are relative, '/'-separated."""

    async def put(self, path: str, data: bytes, content_type: str) -> None: ...

    async def delete(self, path: str) -> None: ...

    async def exists(self, path: str) -> bool: ...


class LocalStorageService:
    """Blob store backed by a directory on the local filesystem."""

    def __init__(self, root: str | None = None) -> None:
        self.root = anyio.Path(root or settings.upload_dir)

    def _resolve(self, path: str) -> anyio.Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise BlobStoreError("resolve", path, detail="path escapes storage root")
        return self.root.joinpath(*relative.parts)

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            await target.parent.mkdir(parents=True, exist_ok=True)
            await target.write_bytes(data)
        except OSError as e:
            # Never leave a truncated file behind
            with suppress(OSError):
                await target.unlink(missing_ok=True)
            raise BlobStoreError("put", path, detail=str(e)) from e
        logger.info("Stored file", path=path, size=len(data), content_type=content_type)

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await target.unlink()
        except FileNotFoundError as e:
            raise BlobNotFoundError(path) from e
        except OSError as e:
            raise BlobStoreError("delete", path, detail=str(e)) from e
        logger.info("Deleted file", path=path)

    async def exists(self, path: str) -> bool:
        return await self._resolve(path).is_file()

    async def ensure_ready(self) -> None:
        """Create the upload directory. Called during application startup."""
        await self.root.mkdir(parents=True, exist_ok=True)
        logger.info("Local storage initialized", upload_dir=str(self.root))


class S3StorageService:
    """S3-compatible object storage service (MinIO/R2/AWS S3)."""

    def __init__(self) -> None:
        """Initialize S3 storage service using settings."""
        self.endpoint_url = settings.s3_endpoint
        self.access_key_id = settings.s3_access_key_id
        self.secret_access_key = settings.s3_secret_access_key
        self.bucket = settings.s3_bucket
        self.region = settings.s3_region
        self.force_path_style = settings.s3_force_path_style
        self._session = aioboto3.Session()

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[Any]:
        """Get an S3 client from the session."""
        config = Config(s3={"addressing_style": "path"}) if self.force_path_style else None
        async with self._session.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name=self.region,
            config=config,
        ) as client:
            yield client

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        try:
            async with self._get_client() as client:
                await client.put_object(
                    Bucket=self.bucket,
                    Key=path,
                    Body=data,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError("put", path, detail=str(e)) from e
        logger.info("Uploaded file to S3", key=path, size=len(data), content_type=content_type)

    async def delete(self, path: str) -> None:
        # S3 deletes are idempotent; check existence first to report missing objects
        if not await self.exists(path):
            raise BlobNotFoundError(path)
        try:
            async with self._get_client() as client:
                await client.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError("delete", path, detail=str(e)) from e
        logger.info("Deleted file from S3", key=path)

    async def exists(self, path: str) -> bool:
        try:
            async with self._get_client() as client:
                await client.head_object(Bucket=self.bucket, Key=path)
                return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise BlobStoreError("exists", path, detail=str(e)) from e
        except BotoCoreError as e:
            raise BlobStoreError("exists", path, detail=str(e)) from e

    async def ensure_ready(self) -> None:
        """Ensure the S3 bucket exists, creating it if necessary.

        Called during application startup.
        """
        async with self._get_client() as client:
            try:
                await client.head_bucket(Bucket=self.bucket)
                logger.info("S3 bucket exists", bucket=self.bucket)
            except ClientError:
                try:
                    await client.create_bucket(Bucket=self.bucket)
                    logger.info("Created S3 bucket", bucket=self.bucket)
                except ClientError as e:
                    logger.error("Failed to create S3 bucket", bucket=self.bucket, error=str(e))
                    raise


def create_storage_service() -> LocalStorageService | S3StorageService:
    """Build the blob store selected by settings.storage_backend."""
    if settings.storage_backend == "s3":
        return S3StorageService()
    return LocalStorageService()


async def delete_quietly(storage: BlobStore, path: str, **log_context: Any) -> bool:
    """Best-effort blob removal used by cascading deletes.

    Missing blobs and storage failures are logged and swallowed so the
    primary row deletion can proceed. Returns True when the blob was removed.
    """
    try:
        await storage.delete(path)
        return True
    except BlobNotFoundError:
        logger.debug("Blob already absent", path=path, **log_context)
    except StorageError as e:
        logger.warning("Failed to delete blob, continuing", path=path, error=str(e), **log_context)
    return False
