"""Storage URL parsing.

Arguments that start with a cloud scheme (``s3://`` or ``oss://``) name a
bucket and optionally an object. Anything else is treated as a local path.
"""

from dataclasses import dataclass
from typing import Union

# Recognized cloud URL schemes, lower case
CLOUD_SCHEMES = ("s3", "oss")

SCHEME_SEPARATOR = "://"


class StorageURLError(Exception):
    """Raised when a storage URL is malformed or of the wrong kind."""

    pass


@dataclass
class CloudURL:
    """A bucket (and optional object) on a cloud storage provider."""

    scheme: str
    bucket: str
    object: str = ""

    def to_string(self) -> str:
        """Render the URL back as ``scheme://bucket/object``."""
        if not self.bucket:
            return f"{self.scheme}{SCHEME_SEPARATOR}"
        return f"{self.scheme}{SCHEME_SEPARATOR}{self.bucket}/{self.object}"

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class FileURL:
    """A path on the local file system."""

    path: str

    def to_string(self) -> str:
        return self.path

    def __str__(self) -> str:
        return self.path


StorageURL = Union[CloudURL, FileURL]


def _split_scheme(text: str) -> tuple[str, str]:
    head, sep, rest = text.partition(SCHEME_SEPARATOR)
    if sep and head.lower() in CLOUD_SCHEMES:
        return head.lower(), rest
    return "", text


def parse_storage_url(text: str) -> StorageURL:
    """Parse a command-line argument into a cloud or local URL.

    Args:
        text: The raw argument, e.g. ``s3://bucket/key`` or ``./dir``.

    Returns:
        CloudURL for cloud schemes, FileURL otherwise.

    Raises:
        StorageURLError: If a cloud URL names an object but no bucket.
    """
    scheme, rest = _split_scheme(text)
    if not scheme:
        return FileURL(path=text)

    rest = rest.replace("\\", "/")
    bucket, _, obj = rest.partition("/")

    if not bucket and obj:
        raise StorageURLError(f"invalid cloud url: {text}, miss bucket")

    return CloudURL(scheme=scheme, bucket=bucket, object=obj)


def check_bucket_url(text: str) -> CloudURL:
    """Validate that an argument names a cloud bucket.

    Raises:
        StorageURLError: If the URL is local or the bucket name is empty.
    """
    url = parse_storage_url(text)

    if not isinstance(url, CloudURL):
        raise StorageURLError(f"parameter is not a cloud url,url is {url.to_string()}")

    if not url.bucket:
        raise StorageURLError(f"bucket name is empty,url is {url.to_string()}")

    return url
