# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
S3 storage for uploaded documents and processed HTML.

Uploads land under ``incoming/`` and processed results under ``processed/``.
Objects are addressed by URL so the frontend and the backend function can
pass references around without sharing credentials.
"""

import re
import urllib.parse
from typing import Iterable, List, Optional, Tuple

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from docwise.utils.logging_helper import setup_logger, StorageError
from docwise.utils.path_utils import sanitize_filename, unique_token

# Set up module-level logger
logger = setup_logger(__name__)

_VIRTUAL_HOST = re.compile(
    r"^(?P<bucket>.+)\.s3(?:[.-](?P<region>[a-z0-9-]+))?\.amazonaws\.com$"
)
_PATH_STYLE_HOST = re.compile(r"^s3(?:[.-](?P<region>[a-z0-9-]+))?\.amazonaws\.com$")

FETCH_TIMEOUT_SECONDS = 60


class StorageClient:
    """Thin wrapper over an S3 bucket.

    Attributes:
        bucket: Bucket holding uploads and processed results
        region: Region used to build public object URLs
        public_base_url: Optional CDN or website base URL for objects
        client: Boto3 S3 client
    """

    def __init__(
        self,
        bucket: str,
        profile: Optional[str] = None,
        region: Optional[str] = None,
        public_base_url: Optional[str] = None,
        upload_prefix: str = "incoming",
        processed_prefix: str = "processed",
        client=None,
    ):
        if not bucket:
            raise StorageError("No S3 bucket configured (set DOCWISE_S3_BUCKET)")

        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.upload_prefix = upload_prefix.strip("/")
        self.processed_prefix = processed_prefix.strip("/")

        if client is None:
            session = boto3.Session(profile_name=profile) if profile else boto3.Session()
            client = session.client("s3", region_name=region)
        self.client = client
        self.region = region or getattr(getattr(client, "meta", None), "region_name", None) or "us-east-1"

    def public_url(self, key: str) -> str:
        """
        Build the URL an object is served from.

        Args:
            key: Object key

        Returns:
            URL under public_base_url if configured, else the virtual-hosted S3 URL
        """
        quoted = urllib.parse.quote(key)
        if self.public_base_url:
            return f"{self.public_base_url}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    def key_from_url(self, url: str) -> Optional[str]:
        """
        Map a URL back to an object key in our bucket.

        Accepts s3:// URIs, virtual-hosted and path-style S3 URLs, and URLs
        under public_base_url.

        Returns:
            The object key, or None if the URL points elsewhere
        """
        if not url:
            return None

        if self.public_base_url and url.startswith(self.public_base_url + "/"):
            key = url[len(self.public_base_url) + 1 :].split("?", 1)[0]
            return urllib.parse.unquote(key) or None

        parsed = urllib.parse.urlparse(url)
        path = urllib.parse.unquote(parsed.path.lstrip("/"))

        if parsed.scheme == "s3":
            return (path or None) if parsed.netloc == self.bucket else None

        if parsed.scheme not in ("http", "https"):
            return None

        host = parsed.hostname or ""
        virtual = _VIRTUAL_HOST.match(host)
        if virtual:
            return (path or None) if virtual.group("bucket") == self.bucket else None

        if _PATH_STYLE_HOST.match(host):
            bucket, _, key = path.partition("/")
            return (key or None) if bucket == self.bucket else None

        return None

    def is_upload_key(self, key: Optional[str]) -> bool:
        """True if the key sits under the upload prefix."""
        return bool(key) and key.startswith(f"{self.upload_prefix}/")

    def _put(self, key: str, body: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=key, Body=body, ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload s3://{self.bucket}/{key}: {e}") from e
        logger.info(f"Uploaded s3://{self.bucket}/{key} ({len(body)} bytes)")
        return self.public_url(key)

    def upload_file(self, data: bytes, file_name: str, content_type: str) -> str:
        """
        Store an uploaded document for backend processing.

        Returns:
            URL of the stored object
        """
        key = f"{self.upload_prefix}/{unique_token()}/{sanitize_filename(file_name)}"
        return self._put(key, data, content_type or "application/octet-stream")

    def upload_processed_html(self, html: str) -> str:
        """
        Store processed HTML, replacing any object with the same key.

        Returns:
            URL of the stored HTML
        """
        key = f"{self.processed_prefix}/{unique_token()}.html"
        return self._put(key, html.encode("utf-8"), "text/html")

    def fetch(self, url: str) -> Tuple[bytes, str]:
        """
        Download a document by URL.

        Objects in our bucket are read through the S3 API; any other http(s)
        URL is downloaded directly.

        Returns:
            Tuple of (bytes, content type)

        Raises:
            StorageError: If the download fails
        """
        key = self.key_from_url(url)
        if key:
            try:
                response = self.client.get_object(Bucket=self.bucket, Key=key)
                data = response["Body"].read()
            except (ClientError, BotoCoreError) as e:
                raise StorageError(f"Failed to fetch file: {e}") from e
            return data, response.get("ContentType") or ""

        if urllib.parse.urlparse(url).scheme not in ("http", "https"):
            raise StorageError(f"Failed to fetch file: unsupported URL {url}")

        try:
            response = requests.get(url, timeout=FETCH_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise StorageError(f"Failed to fetch file: {e}") from e
        return response.content, response.headers.get("Content-Type", "")

    def remove(self, urls: Iterable[str]) -> List[str]:
        """
        Delete uploaded objects, best effort.

        Only keys under the upload prefix are deleted; other URLs are ignored
        and failures are only logged.

        Returns:
            Keys that were deleted
        """
        deleted = []
        for url in urls:
            key = self.key_from_url(url)
            if not key:
                continue
            if not self.is_upload_key(key):
                logger.warning(f"Not deleting {key}: outside {self.upload_prefix}/")
                continue
            try:
                self.client.delete_object(Bucket=self.bucket, Key=key)
                deleted.append(key)
                logger.info(f"Successfully deleted uploaded file: {key}")
            except (ClientError, BotoCoreError) as e:
                logger.warning(f"Failed to delete uploaded file {key}: {e}")
        return deleted
