"""Durable blob storage backends for the briefing library."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from briefcast.application.interfaces import DurableStorage
from briefcast.errors import StorageError

logger = logging.getLogger(__name__)


class LocalDirectoryStorage(DurableStorage):
    """Store each key as one file inside ``root``."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._root / key

    def read_all(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    def write_all(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        tmp_path: str | None = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self._root, prefix=f".{key}.", suffix=".tmp", delete=False
            ) as tmp_file:
                tmp_path = tmp_file.name
                tmp_file.write(data)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def remove(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to remove {key}: {exc}") from exc
        return True


class S3ObjectStorage(DurableStorage):
    """Store each key as an object under ``prefix`` in an S3 bucket."""

    def __init__(self, client: Any, bucket: str, *, prefix: str = "") -> None:
        if not bucket:
            raise StorageError("S3 bucket name is not configured.")
        self._client = client
        self._bucket = bucket
        self._prefix = prefix

    def _object_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    @staticmethod
    def _is_missing(exc: ClientError) -> bool:
        code = exc.response.get("Error", {}).get("Code", "")
        return code in {"NoSuchKey", "404", "NotFound"}

    def read_all(self, key: str) -> Optional[bytes]:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=self._object_key(key))
            return response["Body"].read()
        except ClientError as exc:
            if self._is_missing(exc):
                return None
            raise StorageError(f"Failed to read {key} from S3: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to read {key} from S3: {exc}") from exc

    def write_all(self, key: str, data: bytes) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=self._object_key(key),
                Body=data,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload {key} to S3: {exc}") from exc

    def remove(self, key: str) -> bool:
        object_key = self._object_key(key)
        try:
            self._client.head_object(Bucket=self._bucket, Key=object_key)
        except ClientError as exc:
            if self._is_missing(exc):
                return False
            raise StorageError(f"Failed to inspect {key} in S3: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to inspect {key} in S3: {exc}") from exc

        try:
            self._client.delete_object(Bucket=self._bucket, Key=object_key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to delete {key} from S3: {exc}") from exc
        return True


__all__ = ["LocalDirectoryStorage", "S3ObjectStorage"]
