"""Storage backends for Flickr Backup."""

import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Set

import boto3
from botocore.exceptions import ClientError

from flickr_backup.models import ConfigError, StorageError

logger = logging.getLogger(__name__)

S3_CLIENT_OPTIONS = ("endpoint_url", "region_name", "aws_access_key_id", "aws_secret_access_key")

# Error codes boto3 uses for a missing object on head_object.
NOT_FOUND_CODES = {"404", "NotFound", "NoSuchKey"}

# Suffix of files being written by FileBackend.
PARTIAL_SUFFIX = ".part"


class BackendKind(str, Enum):
    """Available backup targets."""
    S3 = "s3"
    FILE = "file"

    @classmethod
    def parse(cls, value: str) -> "BackendKind":
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigError(f"Unknown backup backend {value!r}, expected one of: {choices}") from e


class StorageBackend(ABC):
    """Key space shared by ``exists``, ``list_keys`` and ``write``.

    Keys are ``/``-separated paths of the form ``<album>/<file>``.
    """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if an object is stored under ``key``."""

    @abstractmethod
    def list_keys(self, prefix: str) -> Set[str]:
        """Return the keys stored directly under the ``prefix`` folder."""

    @abstractmethod
    def write(self, key: str, body: bytes) -> None:
        """Store ``body`` under ``key``."""

    @abstractmethod
    def describe(self) -> str:
        """Human readable location of the backup."""


class S3Backend(StorageBackend):
    """Backend storing objects in an S3 compatible bucket."""

    def __init__(self, bucket: str, client: Any = None, **client_kwargs: Any):
        """Initialize the backend.

        Args:
            bucket: Target bucket name
            client: Preconfigured boto3 S3 client; built from ``client_kwargs`` if omitted
            client_kwargs: Passed to ``boto3.client("s3", ...)`` (endpoint_url, region_name, keys)
        """
        self.bucket = bucket
        self.client = client or boto3.client("s3", **client_kwargs)

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                return False
            raise
        return True

    def list_keys(self, prefix: str) -> Set[str]:
        folder = prefix.rstrip("/") + "/"
        keys = set()
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=folder, Delimiter="/"):
            keys.update(obj["Key"] for obj in page.get("Contents", []))
        return keys

    def write(self, key: str, body: bytes) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=body)

    def describe(self) -> str:
        return f"s3://{self.bucket}"


class FileBackend(StorageBackend):
    """Backend mirroring keys as files under a root directory."""

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def _resolve(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, key))
        if os.path.commonpath([self.root, path]) != self.root:
            raise StorageError(f"Key {key!r} resolves outside of {self.root}")
        return path

    def exists(self, key: str) -> bool:
        return os.path.exists(self._resolve(key))

    def list_keys(self, prefix: str) -> Set[str]:
        folder = prefix.rstrip("/")
        dir_path = self._resolve(folder)
        if not os.path.isdir(dir_path):
            return set()
        return {f"{folder}/{name}" for name in os.listdir(dir_path) if not name.endswith(PARTIAL_SUFFIX)}

    def write(self, key: str, body: bytes) -> None:
        path = self._resolve(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        tmp_path = path + PARTIAL_SUFFIX
        with open(tmp_path, "wb") as f:
            f.write(body)
        os.replace(tmp_path, path)

    def describe(self) -> str:
        return self.root


def create_backend(
    kind: BackendKind,
    backup_directory: str,
    s3_config: Optional[Dict[str, Any]] = None,
) -> StorageBackend:
    """Build the backend selected for this run.

    Args:
        kind: Selected backend
        backup_directory: Root directory for the file backend
        s3_config: ``s3`` section of the secrets file

    Returns:
        Storage backend instance

    Raises:
        ConfigError: If the S3 bucket is not configured
    """
    if kind is BackendKind.FILE:
        return FileBackend(backup_directory)

    if kind is BackendKind.S3:
        s3_config = s3_config or {}
        bucket = s3_config.get("bucket")
        if not bucket:
            raise ConfigError("Missing s3.bucket in secrets file")
        client_kwargs = {k: s3_config[k] for k in S3_CLIENT_OPTIONS if s3_config.get(k)}
        return S3Backend(bucket, **client_kwargs)

    raise ConfigError(f"Unsupported backend: {kind}")
