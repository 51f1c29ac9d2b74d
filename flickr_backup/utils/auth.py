"""Authentication utilities for the Flickr API."""

import logging
from typing import Optional

import flickrapi
from flickrapi.exceptions import FlickrError

from flickr_backup.models import AuthenticationError

logger = logging.getLogger(__name__)

# Backups only ever need to read the library.
PERMS = "read"


def get_flickr_api(
    api_key: Optional[str], api_secret: Optional[str], token_cache_location: Optional[str] = None
) -> flickrapi.FlickrAPI:
    """Build an authenticated Flickr API client.

    If there is no valid token in the token cache, let the user log in
    through the console OAuth flow.

    Args:
        api_key: Flickr application key
        api_secret: Flickr application secret
        token_cache_location: Directory for the OAuth token cache

    Returns:
        FlickrAPI instance returning parsed JSON

    Raises:
        AuthenticationError: If credentials are missing or the OAuth flow fails
    """
    if not api_key or not api_secret:
        raise AuthenticationError("Missing Flickr api_key or api_secret in secrets file")

    try:
        flickr = flickrapi.FlickrAPI(
            api_key,
            api_secret,
            format="parsed-json",
            token_cache_location=token_cache_location,
        )
        if not flickr.token_valid(perms=PERMS):
            logger.info("No valid Flickr token found, starting authorization")
            flickr.authenticate_console(perms=PERMS)
    except FlickrError as e:
        raise AuthenticationError(f"Error authenticating with Flickr: {e}") from e

    return flickr
