"""Console reporter for the tab-separated part report.

The per-part report and the total line go to stdout as plain text, so the
output can be piped into ``cut`` or ``awk``. Status notes go to stderr
through a Rich console.
"""

import sys
from typing import Optional, TextIO
from urllib.parse import quote_plus

from rich.console import Console

from partsize.models import PartInfo, ScanResult, UploadRef, UploadSummary
from partsize.reporters.base import Reporter
from partsize.storage_url import CloudURL

URL_ENCODING_TYPE = "url"

HEADER_FORMAT = "%-10s\t%-32s\t%-10s\t%s"
PART_FORMAT = "%-10d\t%-32s\t%-10d\t%s"
TOTAL_FORMAT = "\ntotal part count:%d\ttotal part size(MB):%.2f\n\n"

HEADER_COLUMNS = ("PartNumber", "UploadId", "Size(Byte)", "Path")


def format_header() -> str:
    """Column header line for the part report."""
    return HEADER_FORMAT % HEADER_COLUMNS


def format_part_line(part: PartInfo, upload_id: str, path: str) -> str:
    """Format one report line: part number, upload ID, size, path."""
    return PART_FORMAT % (part.part_number, upload_id, part.size, path)


def format_total(result: ScanResult) -> str:
    """Format the grand total block."""
    return TOTAL_FORMAT % (result.total.count, result.total_size_mb)


class TextReporter(Reporter):
    """Writes the part report to a text stream.

    Args:
        scheme: URL scheme used when rendering object paths
        encoding_type: "url" to query-escape object keys in paths
        quiet: If True, suppress per-part lines (only show the total)
        stream: Output stream for the report (defaults to stdout)
    """

    def __init__(
        self,
        scheme: str = "s3",
        encoding_type: Optional[str] = None,
        quiet: bool = False,
        stream: Optional[TextIO] = None,
    ):
        self.scheme = scheme
        self.encoding_type = encoding_type
        self.quiet = quiet
        self.stream = stream
        self.err_console = Console(stderr=True, highlight=False)
        self._header_written = False

    def _write(self, text: str, end: str = "\n") -> None:
        print(text, end=end, file=self.stream or sys.stdout)

    def object_path(self, bucket: str, key: str) -> str:
        """Render the cloud path of an object, escaping the key if asked."""
        if self.encoding_type == URL_ENCODING_TYPE:
            key = quote_plus(key, safe="")
        return CloudURL(scheme=self.scheme, bucket=bucket, object=key).to_string()

    def on_scan_start(self, bucket: str) -> None:
        self._header_written = False

    def on_uploads_listed(self, uploads: list[UploadRef]) -> None:
        if not uploads and not self.quiet:
            self.err_console.print("[yellow]No incomplete multipart uploads found.[/yellow]")

    def on_part(self, bucket: str, upload: UploadRef, part: PartInfo) -> None:
        """Write one part line, preceded by the header on first use."""
        if self.quiet:
            return

        if not self._header_written:
            self._write(format_header())
            self._header_written = True

        self._write(format_part_line(part, upload.upload_id, self.object_path(bucket, upload.key)))

    def on_upload_complete(self, summary: UploadSummary) -> None:
        pass

    def on_scan_complete(self, result: ScanResult) -> None:
        """Write the grand total, only when any bytes were uploaded."""
        if result.total.size > 0:
            self._write(format_total(result), end="")
