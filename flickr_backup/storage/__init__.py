"""Backup storage backends."""

from .backends import BackendKind, FileBackend, S3Backend, StorageBackend, create_backend

__all__ = ["BackendKind", "FileBackend", "S3Backend", "StorageBackend", "create_backend"]
