"""Data models for the part size reporter."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class ConnectionConfig:
    """Connection settings for an S3-compatible endpoint."""

    endpoint_url: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    region_name: Optional[str] = None
    addressing_style: str = "path"
    anonymous: bool = False


@dataclass(frozen=True)
class UploadRef:
    """An incomplete multipart upload: object key plus upload ID."""

    key: str
    upload_id: str


@dataclass
class PartInfo:
    """A single uploaded part of an incomplete multipart upload."""

    part_number: int
    size: int
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


@dataclass
class PartTally:
    """Running count and byte total of uploaded parts."""

    count: int = 0
    size: int = 0

    def add(self, part: PartInfo) -> None:
        """Account for one uploaded part."""
        self.count += 1
        self.size += part.size

    def merge(self, other: "PartTally") -> None:
        """Fold another tally into this one."""
        self.count += other.count
        self.size += other.size


@dataclass
class UploadSummary:
    """Totals for one incomplete upload."""

    upload: UploadRef
    tally: PartTally = field(default_factory=PartTally)


@dataclass
class ScanResult:
    """Result of scanning a bucket for incomplete multipart uploads."""

    bucket: str
    uploads: list[UploadSummary] = field(default_factory=list)
    total: PartTally = field(default_factory=PartTally)

    @property
    def total_size_mb(self) -> float:
        """Total size in MB, floored to whole KiB before the final division."""
        return (self.total.size // 1024) / 1024

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dict with per-upload totals and the grand total
        """
        return {
            "bucket": self.bucket,
            "uploads": [
                {
                    "key": summary.upload.key,
                    "upload_id": summary.upload.upload_id,
                    "part_count": summary.tally.count,
                    "part_size": summary.tally.size,
                }
                for summary in self.uploads
            ],
            "summary": {
                "upload_count": len(self.uploads),
                "total_part_count": self.total.count,
                "total_part_size": self.total.size,
                "total_part_size_mb": round(self.total_size_mb, 2),
            },
        }
