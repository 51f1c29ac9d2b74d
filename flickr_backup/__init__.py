"""Incremental backup of Flickr albums to S3 or a local directory."""

__version__ = "1.0.0"
