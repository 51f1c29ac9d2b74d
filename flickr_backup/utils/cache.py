"""On-disk cache for metadata API responses."""

import hashlib
import json
import logging
import os
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".flickr-cache"


class ResponseCache:
    """Write-once, read-through cache keyed by method name and parameters.

    Entries are never invalidated; delete the folder to start over.
    """

    def __init__(self, folder: str = DEFAULT_CACHE_DIR):
        self.folder = folder

    @staticmethod
    def cache_key(method: str, params: Dict[str, Any]) -> str:
        """Return the md5 hex digest identifying a call."""
        payload = f"{method}-{json.dumps(params, sort_keys=True)}"
        return hashlib.md5(payload.encode("utf-8")).hexdigest()

    def path_for(self, method: str, params: Dict[str, Any]) -> str:
        return os.path.join(self.folder, f"{self.cache_key(method, params)}.json")

    def get_or_call(
        self, method: str, params: Dict[str, Any], call: Callable[[], Any]
    ) -> Any:
        """Return the cached response for a call, making and storing it on a miss.

        Args:
            method: API method name
            params: API call parameters
            call: Performs the real call

        Returns:
            Decoded JSON response
        """
        cache_path = self.path_for(method, params)
        if os.path.exists(cache_path):
            try:
                with open(cache_path, "r", encoding="utf-8") as f:
                    response = json.load(f)
            except (OSError, ValueError) as e:
                logger.debug("Ignoring unreadable cache entry %s: %s", cache_path, e)
            else:
                logger.debug("Using cache from %s: %s with params %s", cache_path, method, params)
                return response

        logger.debug("Get %s with params %s", method, params)
        response = call()
        logger.debug("Cache %s with params %s in %s", method, params, cache_path)
        os.makedirs(self.folder, exist_ok=True)
        tmp_path = f"{cache_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(response, f)
        os.replace(tmp_path, cache_path)
        return response
