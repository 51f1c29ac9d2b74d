"""Unit tests for media download."""

import pytest
import requests

from flickr_backup.utils.fetch import fetch_bytes


def test_fetch_bytes(mocker):
    """Test that the response body is returned."""
    mock_get = mocker.patch("flickr_backup.utils.fetch.requests.get")
    mock_get.return_value.content = b"jpeg bytes"

    assert fetch_bytes("https://live.staticflickr.com/1_o.jpg") == b"jpeg bytes"
    mock_get.assert_called_once_with("https://live.staticflickr.com/1_o.jpg")
    mock_get.return_value.raise_for_status.assert_called_once()


def test_fetch_bytes_http_error(mocker):
    """Test that error statuses propagate."""
    mock_get = mocker.patch("flickr_backup.utils.fetch.requests.get")
    mock_get.return_value.raise_for_status.side_effect = requests.HTTPError("404 Client Error")

    with pytest.raises(requests.HTTPError):
        fetch_bytes("https://live.staticflickr.com/missing.jpg")
