"""Main module for Flickr Backup."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from tabulate import tabulate

from flickr_backup.config import Settings, is_truthy, load_settings
from flickr_backup.flickr import FlickrClient
from flickr_backup.models import FlickrBackupError, LoginInfo
from flickr_backup.storage import BackendKind, StorageBackend, create_backend
from flickr_backup.sync import ConsoleSink, SyncOrchestrator, SyncRun, SyncSummary
from flickr_backup.utils import ResponseCache, fetch_bytes, get_flickr_api

logger = logging.getLogger(__name__)

NOISY_LOGGERS = ("flickrapi", "boto3", "botocore", "s3transfer", "urllib3")


class FlickrBackup:
    """Wires settings, Flickr and the storage backend into a sync run."""

    def __init__(self, settings: Settings):
        """Initialize the backup."""
        self.settings = settings
        self.client: Optional[FlickrClient] = None
        self.login: Optional[LoginInfo] = None
        self.backend: Optional[StorageBackend] = None

    def authenticate(self) -> None:
        """Authenticate with Flickr and check the login."""
        flickr = get_flickr_api(
            self.settings.flickr.get("api_key"),
            self.settings.flickr.get("api_secret"),
            self.settings.flickr.get("token_cache_location"),
        )
        cache = ResponseCache(self.settings.cache_directory) if self.settings.use_cache else None
        self.client = FlickrClient(flickr, cache=cache)
        self.login = self.client.test_login()
        logger.info("Logged in to Flickr as %s (%s)", self.login.username, self.login.user_id)

    def open_backend(self) -> None:
        """Create the storage backend selected in the settings."""
        self.backend = create_backend(
            self.settings.backend, self.settings.backup_directory, self.settings.s3
        )

    def print_settings(self) -> None:
        """Print the settings the run uses."""
        rows = [["Backup strategy", self.settings.backend.value]]
        if self.settings.backend is BackendKind.S3:
            rows.append(["S3 bucket", self.settings.s3.get("bucket", "")])
        else:
            rows.append(["Backup directory", self.settings.backup_directory])
        albums = ", ".join(sorted(self.settings.album_filter)) if self.settings.album_filter else "none"
        rows.append(["Filter albums", albums])
        rows.append(["Use cache", self.settings.use_cache])
        rows.append(["Debug mode", self.settings.debug])
        print(tabulate(rows, tablefmt="plain"))
        print()

    def run(self) -> SyncSummary:
        """Back up all selected albums."""
        if not self.client or not self.login:
            self.authenticate()
        if not self.backend:
            self.open_backend()

        sync_run = SyncRun(
            source=self.client,
            backend=self.backend,
            fetch=fetch_bytes,
            login=self.login,
            user_id=self.settings.user_id or self.login.user_id,
            sink=ConsoleSink(),
            album_filter=self.settings.album_filter,
        )
        return SyncOrchestrator(sync_run).sync_all()


def print_summary(summary: SyncSummary) -> None:
    """Print the totals of a finished run."""
    rows = [
        ["Albums processed", summary.albums],
        ["Albums already complete", summary.short_circuited],
        ["Albums filtered out", summary.filtered_out],
        ["Photos written", summary.written],
        ["Photos skipped", summary.skipped],
        ["Duplicate titles", summary.duplicates],
    ]
    print("\nBackup summary:")
    print(tabulate(rows, tablefmt="psql"))


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Flickr Backup")

    parser.add_argument(
        "--backend",
        choices=[kind.value for kind in BackendKind],
        help="Backup target (default: s3, env BACKUP_STRATEGY)",
    )
    parser.add_argument("--backup-dir", type=str, help="Root directory for the file backend")
    parser.add_argument("--secrets", type=str, help="Path to secrets.json (env SECRETS_PATH)")
    parser.add_argument(
        "--album",
        action="append",
        default=[],
        help="Only back up albums with this title, may be repeated (env FILTER_PHOTOSETS)",
    )
    parser.add_argument("--user-id", type=str, help="Back up another user's albums")
    parser.add_argument("--use-cache", action="store_true", help="Cache Flickr API responses")
    parser.add_argument("--cache-dir", type=str, help="Directory of the response cache")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the Flickr Backup CLI."""
    args = parse_arguments(argv)
    configure_logging(args.debug or is_truthy(os.environ.get("DEBUG")))

    try:
        settings = load_settings(args)

        backup = FlickrBackup(settings)
        backup.print_settings()
        backup.open_backend()
        backup.authenticate()
        summary = backup.run()
    except FlickrBackupError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)

    print_summary(summary)


if __name__ == "__main__":
    main()
