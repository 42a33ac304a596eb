"""Incomplete multipart upload scanner.

Walks a bucket in two phases:
1. Page through ListMultipartUploads to collect every incomplete upload
2. Page through ListParts for each upload, accumulating part count and size

Marker handling is left to botocore's paginators, which stop when a page is
no longer truncated and raise botocore.exceptions.PaginationError when the
same marker comes back twice. SDK errors are not caught here; they abort
the scan and propagate to the caller unchanged.
"""

from typing import Any, Iterator, Optional

from loguru import logger

from partsize.models import PartInfo, PartTally, ScanResult, UploadRef, UploadSummary

# Largest page the S3 listing APIs return
DEFAULT_PAGE_SIZE = 1000


class PartSizeScanner:
    """Sums the bytes uploaded so far by incomplete multipart uploads.

    Args:
        s3_client: boto3 S3 client
        bucket: Bucket name to scan
        reporter: Optional reporter for progress callbacks
        page_size: Maximum uploads or parts requested per listing call
    """

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        reporter: Optional[Any] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.s3_client = s3_client
        self.bucket = bucket
        self.reporter = reporter
        self.page_size = page_size

    def _paginate(self, operation: str, **params: Any):
        paginator = self.s3_client.get_paginator(operation)
        return paginator.paginate(
            PaginationConfig={"PageSize": self.page_size},
            **params,
        )

    def list_incomplete_uploads(self) -> list[UploadRef]:
        """List every incomplete multipart upload in the bucket.

        Returns:
            Upload references in listing order.
        """
        uploads: list[UploadRef] = []

        pages = self._paginate("list_multipart_uploads", Bucket=self.bucket)
        for number, page in enumerate(pages, start=1):
            entries = page.get("Uploads", [])
            logger.debug(
                "ListMultipartUploads page {} (key_marker={!r}, upload_id_marker={!r}): {} uploads",
                number, page.get("KeyMarker"), page.get("UploadIdMarker"), len(entries),
            )

            for entry in entries:
                uploads.append(UploadRef(key=entry["Key"], upload_id=entry["UploadId"]))

        return uploads

    def list_upload_parts(self, upload: UploadRef) -> Iterator[PartInfo]:
        """Iterate over the parts uploaded so far for one upload.

        Yields:
            PartInfo for each part, across all pages.
        """
        pages = self._paginate(
            "list_parts",
            Bucket=self.bucket,
            Key=upload.key,
            UploadId=upload.upload_id,
        )
        for page in pages:
            parts = page.get("Parts", [])
            logger.debug(
                "ListParts {} ({}) from marker {}: {} parts",
                upload.key, upload.upload_id, page.get("PartNumberMarker", 0), len(parts),
            )

            for part in parts:
                yield PartInfo(
                    part_number=part["PartNumber"],
                    size=part["Size"],
                    etag=part.get("ETag"),
                    last_modified=part.get("LastModified"),
                )

    def size_upload(self, upload: UploadRef) -> UploadSummary:
        """Count and sum the parts of one incomplete upload."""
        summary = UploadSummary(upload=upload)

        for part in self.list_upload_parts(upload):
            summary.tally.add(part)
            if self.reporter:
                self.reporter.on_part(self.bucket, upload, part)

        if self.reporter:
            self.reporter.on_upload_complete(summary)

        return summary

    def scan(self) -> ScanResult:
        """Scan the bucket and total all uploaded parts.

        Returns:
            ScanResult with per-upload and grand totals
        """
        if self.reporter:
            self.reporter.on_scan_start(self.bucket)

        uploads = self.list_incomplete_uploads()
        logger.info("Found {} incomplete multipart uploads in {}", len(uploads), self.bucket)

        if self.reporter:
            self.reporter.on_uploads_listed(uploads)

        result = ScanResult(bucket=self.bucket)
        for upload in uploads:
            summary = self.size_upload(upload)
            result.uploads.append(summary)
            result.total.merge(summary.tally)

        logger.info(
            "Scanned {}: {} parts, {} bytes",
            self.bucket, result.total.count, result.total.size,
        )

        if self.reporter:
            self.reporter.on_scan_complete(result)

        return result
