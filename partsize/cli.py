"""Command-line interface for the part size reporter.

Provides argument parsing and the main entry point for the
``getallpartsize`` command.
"""

import argparse
import sys
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from partsize.config import ConfigError, load_connection
from partsize.logging_config import DEFAULT_LOG_LEVEL, LOG_LEVELS, configure_logging
from partsize.models import PartInfo, ScanResult, UploadRef, UploadSummary
from partsize.reporters import JsonReporter, Reporter, ReportError, TextReporter
from partsize.reporters.console import URL_ENCODING_TYPE
from partsize.s3_client import build_s3_client
from partsize.scanner import PartSizeScanner
from partsize.storage_url import CloudURL, StorageURLError, check_bucket_url

GET_ALL_PART_SIZE = "getallpartsize"


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both TextReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_scan_start(self, bucket: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_scan_start(bucket)

    def on_uploads_listed(self, uploads: list[UploadRef]) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_uploads_listed(uploads)

    def on_part(self, bucket: str, upload: UploadRef, part: PartInfo) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_part(bucket, upload, part)

    def on_upload_complete(self, summary: UploadSummary) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_upload_complete(summary)

    def on_scan_complete(self, result: ScanResult) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_scan_complete(result)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="partsize",
        description="Report the space used by incomplete multipart uploads",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    command = subparsers.add_parser(
        GET_ALL_PART_SIZE,
        help="List every uploaded part of incomplete multipart uploads in a bucket",
        description=(
            "List the uploaded parts of every incomplete multipart upload in a "
            "bucket, then print the total part count and size."
        ),
    )

    command.add_argument(
        "bucket_url",
        metavar="BUCKET_URL",
        help="Bucket to scan, e.g. s3://my-bucket",
    )

    connection = command.add_argument_group("connection options")
    connection.add_argument(
        "-c", "--config-file",
        metavar="PATH",
        help="Path to configuration file (default: config.json if present)",
    )
    connection.add_argument(
        "--profile",
        help="Profile to read from the configuration file (default: default)",
    )
    connection.add_argument(
        "-e", "--endpoint",
        metavar="URL",
        help="Endpoint URL of the S3-compatible service",
    )
    connection.add_argument(
        "-i", "--access-key-id",
        metavar="ID",
        help="Access key ID",
    )
    connection.add_argument(
        "-k", "--access-key-secret",
        metavar="SECRET",
        help="Access key secret",
    )
    connection.add_argument(
        "-t", "--sts-token",
        metavar="TOKEN",
        help="STS session token",
    )
    connection.add_argument(
        "--region",
        help="Region name",
    )
    connection.add_argument(
        "--addressing-style",
        choices=["path", "virtual", "auto"],
        help="Bucket addressing style (default: path)",
    )
    connection.add_argument(
        "--anonymous",
        action="store_true",
        default=None,
        help="Send unsigned requests (public buckets only)",
    )

    output = command.add_argument_group("output options")
    output.add_argument(
        "--encoding-type",
        choices=[URL_ENCODING_TYPE],
        help="Query-escape object keys in the report paths",
    )
    output.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-part output, show only the total",
    )
    output.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON results to file",
    )
    output.add_argument(
        "--loglevel",
        choices=LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help=f"Log level for messages on stderr (default: {DEFAULT_LOG_LEVEL})",
    )

    return parser.parse_args(argv)


def connection_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map command-line connection options to configuration fields."""
    return {
        "endpoint_url": args.endpoint,
        "aws_access_key_id": args.access_key_id,
        "aws_secret_access_key": args.access_key_secret,
        "aws_session_token": args.sts_token,
        "region_name": args.region,
        "addressing_style": args.addressing_style,
        "anonymous": args.anonymous,
    }


def create_reporters(args: argparse.Namespace, bucket_url: CloudURL) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments
        bucket_url: The validated bucket URL

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [
        TextReporter(
            scheme=bucket_url.scheme,
            encoding_type=args.encoding_type,
            quiet=args.quiet,
        )
    ]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def run_get_all_part_size(args: argparse.Namespace) -> int:
    """Run the getallpartsize command.

    Returns:
        Exit code: 0 for success, 1 for storage errors, 2 for usage errors
    """
    try:
        bucket_url = check_bucket_url(args.bucket_url)
    except StorageURLError as e:
        logger.error("Invalid bucket URL: {}", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        config = load_connection(
            config_path=args.config_file,
            profile=args.profile,
            overrides=connection_overrides(args),
        )
        s3_client = build_s3_client(config)
    except (ConfigError, BotoCoreError, ValueError) as e:
        logger.error("Configuration error: {}", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    reporters = create_reporters(args, bucket_url)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    scanner = PartSizeScanner(s3_client, bucket_url.bucket, reporter=reporter)

    try:
        scanner.scan()
    except (ClientError, BotoCoreError) as e:
        logger.opt(exception=e).debug("Scan traceback")
        logger.error("Scan of {} failed: {}", bucket_url.bucket, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ReportError as e:
        logger.error("Output error: {}", e)
        print(f"Output error: {e}", file=sys.stderr)
        return 2

    return 0


COMMANDS = {
    GET_ALL_PART_SIZE: run_get_all_part_size,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for storage errors, 2 for usage errors
    """
    args = parse_args(argv)
    configure_logging(args.loglevel)
    logger.debug("Running {} on {}", args.command, args.bucket_url)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
