"""
Incomplete multipart upload size reporter.

Lists the in-progress multipart uploads in an S3-compatible bucket and
totals the bytes their uploaded parts already occupy.
"""

__version__ = "1.0.0"

from partsize.cli import main

__all__ = ["main", "__version__"]
