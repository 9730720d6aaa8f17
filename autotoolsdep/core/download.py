"""
Streaming archive downloads.

This module provides the network side of the pipeline:
- URL validation without any network activity
- HTTP/HTTPS GET with a caller-supplied timeout
- A lazily-read, gzip-decompressing stream over the response body
- fetch_and_extract() to unpack a remote .tar.gz straight into a directory

No part of the archive is written to disk before extraction, and memory use
is bounded by the read chunk size rather than the archive size.
"""

import gzip
import logging
import math
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

import requests
import urllib3
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema, RequestException

from autotoolsdep.core.exceptions import TransportError, UrlParseError
from autotoolsdep.core.filesystem import extract_stream

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")

Timeout = Union[int, float, timedelta]


def parse_url(url: str) -> str:
    """
    Validate a source URL without touching the network.

    Args:
        url: URL of the archive

    Returns:
        The normalized URL

    Raises:
        UrlParseError: If the URL is malformed or not http(s)

    Example:
        >>> parse_url("https://example.com/pkg-1.0.tar.gz")
        'https://example.com/pkg-1.0.tar.gz'
    """
    if not isinstance(url, str) or not url.strip():
        raise UrlParseError(str(url), "URL cannot be empty")

    try:
        prepared = requests.Request("GET", url).prepare()
    except (MissingSchema, InvalidSchema, InvalidURL) as e:
        raise UrlParseError(url, str(e)) from e

    scheme = urlsplit(prepared.url).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise UrlParseError(url, f"unsupported scheme '{scheme}'")

    return prepared.url


def _request_timeout(timeout: Timeout) -> Optional[float]:
    # Zero is the caller's explicit request for no timeout.
    if isinstance(timeout, timedelta):
        timeout = timeout.total_seconds()
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ValueError(f"Timeout must be a number of seconds, got {timeout!r}")
    if not math.isfinite(timeout) or timeout < 0:
        raise ValueError(f"Timeout must be finite and non-negative, got {timeout}")
    return float(timeout) if timeout > 0 else None


class _ResponseReader:
    """File-like view of a response body that reports network errors as TransportError."""

    def __init__(self, response: requests.Response, url: str):
        self._response = response
        self._url = url
        # Read the body exactly as sent; gzip is decoded by ArchiveStream.
        self._response.raw.decode_content = False

    def read(self, size: int = -1) -> bytes:
        try:
            return self._response.raw.read(None if size < 0 else size)
        except (urllib3.exceptions.HTTPError, RequestException, OSError) as e:
            raise TransportError(self._url, str(e)) from e

    def close(self) -> None:
        self._response.close()


class ArchiveStream:
    """
    Lazily-read stream of a gzip-compressed download, decompressed on read.

    Closing the stream closes the underlying HTTP response. Use as a context
    manager.
    """

    def __init__(self, response: requests.Response, url: str):
        self.url = url
        self._reader = _ResponseReader(response, url)
        self._gzip = gzip.GzipFile(fileobj=self._reader, mode="rb")

    def read(self, size: int = -1) -> bytes:
        return self._gzip.read(size)

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        try:
            self._gzip.close()
        finally:
            self._reader.close()

    def __enter__(self) -> "ArchiveStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def fetch_decompress(url: str, timeout: Timeout) -> ArchiveStream:
    """
    Open a remote .tar.gz and return a decompressing byte stream over it.

    The connection is established and the status checked before this
    returns; the body is only read as the caller reads the stream.

    Args:
        url: URL of the gzip-compressed archive
        timeout: Connect/read timeout in seconds (or timedelta). Zero
            disables the timeout.

    Returns:
        ArchiveStream yielding the uncompressed payload

    Raises:
        UrlParseError: If the URL is malformed
        TransportError: On connection failure, timeout or non-2xx response
        ValueError: If timeout is negative or not finite
    """
    parsed_url = parse_url(url)
    request_timeout = _request_timeout(timeout)

    logger.info(f"Downloading .tar.gz archive from {parsed_url}")

    try:
        response = requests.get(
            parsed_url, stream=True, timeout=request_timeout, allow_redirects=True
        )
    except RequestException as e:
        raise TransportError(parsed_url, str(e)) from e

    try:
        response.raise_for_status()
    except RequestException as e:
        response.close()
        raise TransportError(parsed_url, str(e)) from e

    return ArchiveStream(response, parsed_url)


def fetch_and_extract(url: str, dest_dir: Path, timeout: Timeout) -> Path:
    """
    Download a .tar.gz and extract it into dest_dir in a single streaming pass.

    Args:
        url: URL of the archive
        dest_dir: Existing directory to extract into
        timeout: Fetch timeout (see fetch_decompress)

    Returns:
        dest_dir

    Raises:
        UrlParseError: If the URL is malformed
        TransportError: If the download fails
        FilesystemError: If extraction fails

    Example:
        >>> fetch_and_extract("https://example.com/pkg-1.0.tar.gz", Path("/tmp/dl"), 30)
        PosixPath('/tmp/dl')
    """
    dest_dir = Path(dest_dir)
    with fetch_decompress(url, timeout) as stream:
        logger.info(f"Extracting response stream into {dest_dir}")
        extract_stream(stream, dest_dir)
    return dest_dir


__all__ = [
    "SUPPORTED_SCHEMES",
    "ArchiveStream",
    "parse_url",
    "fetch_decompress",
    "fetch_and_extract",
]
