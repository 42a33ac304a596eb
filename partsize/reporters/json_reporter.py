"""JSON reporter for structured output.

Writes the scan result (per-upload totals and the grand total) to a file
for consumption by other tools.
"""

import json
from pathlib import Path
from typing import Optional

from partsize.models import PartInfo, ScanResult, UploadRef, UploadSummary
from partsize.reporters.base import Reporter


class ReportError(Exception):
    """Raised when a report cannot be written."""

    pass


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path
        self.output: Optional[dict] = None

    def on_scan_start(self, bucket: str) -> None:
        """No-op for JSON reporter."""
        pass

    def on_uploads_listed(self, uploads: list[UploadRef]) -> None:
        """No-op for JSON reporter."""
        pass

    def on_part(self, bucket: str, upload: UploadRef, part: PartInfo) -> None:
        """No-op - totals come from the scan result."""
        pass

    def on_upload_complete(self, summary: UploadSummary) -> None:
        """No-op for JSON reporter."""
        pass

    def on_scan_complete(self, result: ScanResult) -> dict:
        """Generate and write the JSON data.

        Args:
            result: The completed scan result

        Returns:
            The generated JSON data as a dictionary

        Raises:
            ReportError: If the output file cannot be written
        """
        self.output = result.to_dict()

        if self.output_path:
            self._write_file(self.output)

        return self.output

    def _write_file(self, output: dict) -> None:
        path = Path(self.output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(output, f, indent=2)
        except OSError as e:
            raise ReportError(f"Cannot write JSON output to {self.output_path}: {e}") from e
