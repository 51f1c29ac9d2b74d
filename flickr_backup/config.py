"""Configuration for Flickr Backup.

Values come from the secrets file, environment variables and command line
flags, the latter taking precedence.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from flickr_backup.models import ConfigError
from flickr_backup.storage import BackendKind
from flickr_backup.utils.cache import DEFAULT_CACHE_DIR

DEFAULT_SECRETS_PATH = "secrets.json"
DEFAULT_BACKUP_DIRECTORY = "./backup"
DEFAULT_BACKEND = BackendKind.S3

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Resolved settings of a run."""
    backend: BackendKind = DEFAULT_BACKEND
    backup_directory: str = DEFAULT_BACKUP_DIRECTORY
    secrets_path: str = DEFAULT_SECRETS_PATH
    album_filter: Optional[FrozenSet[str]] = None
    user_id: Optional[str] = None
    use_cache: bool = False
    cache_directory: str = DEFAULT_CACHE_DIR
    debug: bool = False
    secrets: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def flickr(self) -> Dict[str, Any]:
        return self.secrets.get("flickr", {})

    @property
    def s3(self) -> Dict[str, Any]:
        return self.secrets.get("s3", {})


def is_truthy(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in TRUTHY


def parse_album_filter(values: Iterable[str]) -> Optional[FrozenSet[str]]:
    """Split comma separated album titles into a set, None if empty."""
    titles = set()
    for value in values:
        titles.update(title.strip() for title in value.split(","))
    titles.discard("")
    return frozenset(titles) or None


def load_secrets(path: str) -> Dict[str, Any]:
    """Load the secrets JSON file.

    Args:
        path: Path to the secrets file

    Returns:
        Parsed secrets with ``flickr`` and ``s3`` sections

    Raises:
        ConfigError: If the file is missing or is not a JSON object
    """
    if not os.path.exists(path):
        raise ConfigError(f"Missing secrets file at {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            secrets = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read secrets file {path}: {e}") from e

    if not isinstance(secrets, dict):
        raise ConfigError(f"Secrets file {path} must contain a JSON object")
    return secrets


def load_settings(args: Any, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Merge command line arguments, environment and secrets into Settings.

    Args:
        args: Parsed argparse namespace
        environ: Environment mapping, ``os.environ`` by default

    Returns:
        Settings for this run

    Raises:
        ConfigError: If a value is invalid or the secrets file cannot be loaded
    """
    environ = os.environ if environ is None else environ

    backend = args.backend or environ.get("BACKUP_STRATEGY") or DEFAULT_BACKEND.value
    albums = args.album or ([environ["FILTER_PHOTOSETS"]] if environ.get("FILTER_PHOTOSETS") else [])
    secrets_path = args.secrets or environ.get("SECRETS_PATH") or DEFAULT_SECRETS_PATH

    return Settings(
        backend=BackendKind.parse(backend),
        backup_directory=args.backup_dir or environ.get("BACKUP_DIRECTORY") or DEFAULT_BACKUP_DIRECTORY,
        secrets_path=secrets_path,
        album_filter=parse_album_filter(albums),
        user_id=args.user_id or environ.get("USER_ID") or None,
        use_cache=args.use_cache or is_truthy(environ.get("USE_CACHE")),
        cache_directory=args.cache_dir or DEFAULT_CACHE_DIR,
        debug=args.debug or is_truthy(environ.get("DEBUG")),
        secrets=load_secrets(secrets_path),
    )
