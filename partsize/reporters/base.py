"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from partsize.models import PartInfo, ScanResult, UploadRef, UploadSummary


class Reporter(ABC):
    """Abstract base class for scan reporters."""

    @abstractmethod
    def on_scan_start(self, bucket: str) -> None:
        """Called before the bucket is listed."""
        pass

    @abstractmethod
    def on_uploads_listed(self, uploads: list["UploadRef"]) -> None:
        """Called once all incomplete uploads have been listed."""
        pass

    @abstractmethod
    def on_part(self, bucket: str, upload: "UploadRef", part: "PartInfo") -> None:
        """Called for each uploaded part."""
        pass

    @abstractmethod
    def on_upload_complete(self, summary: "UploadSummary") -> None:
        """Called when all parts of an upload have been counted."""
        pass

    @abstractmethod
    def on_scan_complete(self, result: "ScanResult") -> None:
        """Called when the whole bucket has been scanned."""
        pass
