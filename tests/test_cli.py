"""Tests for CLI entry point.

Tests the command-line interface and argument parsing.
"""

import pytest
from unittest.mock import Mock, patch

from botocore.exceptions import ClientError, PaginationError
from loguru import logger

from partsize.cli import CompositeReporter, create_reporters, main, parse_args
from partsize.config import ENV_VARS, ConfigError
from partsize.models import ConnectionConfig, ScanResult
from partsize.reporters import JsonReporter, ReportError, TextReporter
from partsize.storage_url import check_bucket_url


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """No config file or PARTSIZE_* variables leak in; reset Loguru sinks."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger.remove()


def empty_bucket_client():
    client = Mock()
    client.get_paginator.return_value.paginate.return_value = [
        {"Uploads": [], "IsTruncated": False}
    ]
    return client


def no_such_bucket_client():
    client = Mock()
    client.get_paginator.return_value.paginate.side_effect = ClientError(
        {"Error": {"Code": "NoSuchBucket", "Message": "The bucket does not exist"}},
        "ListMultipartUploads",
    )
    return client


@pytest.fixture
def error_messages():
    """Collect ERROR records logged while main() runs."""
    messages = []
    with patch("partsize.cli.configure_logging"):
        logger.add(messages.append, level="ERROR", format="{message}")
        yield messages


class TestParseArgs:
    """Tests for argument parsing."""

    def test_default_args(self):
        """Should have sensible defaults."""
        args = parse_args(["getallpartsize", "s3://bucket"])

        assert args.command == "getallpartsize"
        assert args.bucket_url == "s3://bucket"
        assert args.config_file is None
        assert args.profile is None
        assert args.endpoint is None
        assert args.encoding_type is None
        assert args.loglevel == "warning"
        assert args.quiet is False
        assert args.json_output is None
        assert args.anonymous is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_bucket_url_required(self):
        with pytest.raises(SystemExit):
            parse_args(["getallpartsize"])

    def test_extra_positional_rejected(self):
        """The command takes exactly one bucket URL."""
        with pytest.raises(SystemExit):
            parse_args(["getallpartsize", "s3://a", "s3://b"])

    def test_unknown_command_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["du", "s3://bucket"])

    def test_connection_short_flags(self):
        args = parse_args([
            "getallpartsize", "s3://bucket",
            "-c", "custom.json",
            "-e", "https://s3.example.com",
            "-i", "key",
            "-k", "secret",
            "-t", "token",
        ])

        assert args.config_file == "custom.json"
        assert args.endpoint == "https://s3.example.com"
        assert args.access_key_id == "key"
        assert args.access_key_secret == "secret"
        assert args.sts_token == "token"

    def test_connection_long_flags(self):
        args = parse_args([
            "getallpartsize", "s3://bucket",
            "--config-file", "custom.json",
            "--profile", "r2",
            "--region", "auto",
            "--addressing-style", "virtual",
        ])

        assert args.config_file == "custom.json"
        assert args.profile == "r2"
        assert args.region == "auto"
        assert args.addressing_style == "virtual"

    def test_invalid_addressing_style(self):
        with pytest.raises(SystemExit):
            parse_args(["getallpartsize", "s3://bucket", "--addressing-style", "diagonal"])

    def test_anonymous_flag(self):
        args = parse_args(["getallpartsize", "s3://bucket", "--anonymous"])
        assert args.anonymous is True

    def test_encoding_type(self):
        args = parse_args(["getallpartsize", "s3://bucket", "--encoding-type", "url"])
        assert args.encoding_type == "url"

    def test_invalid_encoding_type(self):
        with pytest.raises(SystemExit):
            parse_args(["getallpartsize", "s3://bucket", "--encoding-type", "base64"])

    def test_output_flags(self):
        args = parse_args([
            "getallpartsize", "s3://bucket",
            "-q",
            "-j", "parts.json",
            "--loglevel", "debug",
        ])

        assert args.quiet is True
        assert args.json_output == "parts.json"
        assert args.loglevel == "debug"


class TestCreateReporters:
    """Tests for reporter creation based on args."""

    def test_creates_text_reporter_by_default(self):
        args = parse_args(["getallpartsize", "s3://bucket"])

        reporters = create_reporters(args, check_bucket_url(args.bucket_url))

        assert len(reporters) == 1
        assert isinstance(reporters[0], TextReporter)

    def test_text_reporter_options(self):
        args = parse_args(["getallpartsize", "oss://bucket", "-q", "--encoding-type", "url"])

        reporter = create_reporters(args, check_bucket_url(args.bucket_url))[0]

        assert reporter.scheme == "oss"
        assert reporter.quiet is True
        assert reporter.encoding_type == "url"

    def test_creates_json_reporter_when_requested(self):
        args = parse_args(["getallpartsize", "s3://bucket", "-j", "parts.json"])

        reporters = create_reporters(args, check_bucket_url(args.bucket_url))

        json_reporter = next(r for r in reporters if isinstance(r, JsonReporter))
        assert json_reporter.output_path == "parts.json"


class TestCompositeReporter:
    """Tests for reporter fan-out."""

    def test_delegates_to_all(self):
        first, second = Mock(), Mock()
        composite = CompositeReporter([first, second])
        result = ScanResult(bucket="b")

        composite.on_scan_start("b")
        composite.on_uploads_listed([])
        composite.on_part("b", Mock(), Mock())
        composite.on_upload_complete(Mock())
        composite.on_scan_complete(result)

        for reporter in (first, second):
            reporter.on_scan_start.assert_called_once_with("b")
            reporter.on_uploads_listed.assert_called_once_with([])
            reporter.on_part.assert_called_once()
            reporter.on_upload_complete.assert_called_once()
            reporter.on_scan_complete.assert_called_once_with(result)


class TestMain:
    """Tests for main entry point."""

    @patch("partsize.cli.build_s3_client")
    def test_main_returns_0_on_success(self, mock_build):
        mock_build.return_value = empty_bucket_client()

        assert main(["getallpartsize", "s3://bucket"]) == 0

    @patch("partsize.cli.build_s3_client")
    def test_main_scans_named_bucket(self, mock_build):
        client = empty_bucket_client()
        mock_build.return_value = client

        main(["getallpartsize", "s3://my-bucket/ignored/prefix"])

        paginate = client.get_paginator.return_value.paginate
        assert paginate.call_args.kwargs["Bucket"] == "my-bucket"

    @patch("partsize.cli.build_s3_client")
    def test_main_passes_connection_options(self, mock_build):
        mock_build.return_value = empty_bucket_client()

        main([
            "getallpartsize", "s3://bucket",
            "-e", "https://s3.example.com",
            "-i", "key",
            "-k", "secret",
            "--region", "eu-central-1",
        ])

        config = mock_build.call_args.args[0]
        assert config == ConnectionConfig(
            endpoint_url="https://s3.example.com",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            region_name="eu-central-1",
        )

    @patch("partsize.cli.build_s3_client")
    def test_main_passes_anonymous(self, mock_build):
        mock_build.return_value = empty_bucket_client()

        main(["getallpartsize", "s3://public-bucket", "--anonymous"])

        assert mock_build.call_args.args[0] == ConnectionConfig(anonymous=True)

    @patch("partsize.cli.build_s3_client")
    def test_main_returns_2_on_local_path(self, mock_build, capsys):
        result = main(["getallpartsize", "/tmp/bucket"])

        assert result == 2
        assert "parameter is not a cloud url" in capsys.readouterr().err
        mock_build.assert_not_called()

    def test_main_returns_2_on_empty_bucket_name(self, capsys):
        assert main(["getallpartsize", "s3://"]) == 2
        assert "bucket name is empty" in capsys.readouterr().err

    @patch("partsize.cli.load_connection")
    def test_main_returns_2_on_config_error(self, mock_load, capsys):
        mock_load.side_effect = ConfigError("No config found")

        assert main(["getallpartsize", "s3://bucket"]) == 2
        assert "Configuration error: No config found" in capsys.readouterr().err

    def test_main_returns_2_on_incomplete_credentials(self, capsys):
        assert main(["getallpartsize", "s3://bucket", "-i", "key"]) == 2
        assert "must be given together" in capsys.readouterr().err

    def test_main_returns_2_on_directory_config(self, tmp_path, capsys):
        assert main(["getallpartsize", "s3://bucket", "-c", str(tmp_path)]) == 2
        assert "Cannot read config file" in capsys.readouterr().err

    def test_main_returns_2_on_non_utf8_config(self, tmp_path, capsys):
        config_file = tmp_path / "latin1.json"
        config_file.write_bytes(b'{"default": {"region_name": "r\xe9gion"}}')

        assert main(["getallpartsize", "s3://bucket", "-c", str(config_file)]) == 2
        assert "not valid UTF-8" in capsys.readouterr().err

    @patch("partsize.cli.build_s3_client")
    def test_main_returns_1_on_client_error(self, mock_build, capsys):
        mock_build.return_value = no_such_bucket_client()

        assert main(["getallpartsize", "s3://missing"]) == 1
        assert "NoSuchBucket" in capsys.readouterr().err

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_main_returns_1_on_pagination_error(self, mock_build, mock_scanner_class):
        mock_scanner_class.return_value.scan.side_effect = PaginationError(message="stuck")

        assert main(["getallpartsize", "s3://bucket"]) == 1

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_main_returns_2_on_report_error(self, mock_build, mock_scanner_class, capsys):
        mock_scanner_class.return_value.scan.side_effect = ReportError("disk full")

        assert main(["getallpartsize", "s3://bucket", "-j", "out.json"]) == 2
        assert "Output error: disk full" in capsys.readouterr().err

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_main_uses_composite_reporter(self, mock_build, mock_scanner_class):
        """Should use CompositeReporter when JSON output is requested."""
        main(["getallpartsize", "s3://bucket", "--json-output", "results.json"])

        reporter = mock_scanner_class.call_args.kwargs["reporter"]
        assert isinstance(reporter, CompositeReporter)

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_main_uses_single_reporter(self, mock_build, mock_scanner_class):
        main(["getallpartsize", "s3://bucket"])

        reporter = mock_scanner_class.call_args.kwargs["reporter"]
        assert isinstance(reporter, TextReporter)

    @patch("partsize.cli.configure_logging")
    @patch("partsize.cli.build_s3_client")
    def test_main_configures_logging(self, mock_build, mock_configure):
        mock_build.return_value = empty_bucket_client()

        main(["getallpartsize", "s3://bucket", "--loglevel", "debug"])

        mock_configure.assert_called_once_with("debug")


class TestErrorLogging:
    """Every non-zero exit leaves an ERROR record in the log."""

    def test_bad_url_logged(self, error_messages):
        assert main(["getallpartsize", "/tmp/bucket"]) == 2
        assert any("Invalid bucket URL" in m for m in error_messages)

    @patch("partsize.cli.load_connection")
    def test_config_error_logged(self, mock_load, error_messages):
        mock_load.side_effect = ConfigError("No config found")

        assert main(["getallpartsize", "s3://bucket"]) == 2
        assert any("Configuration error: No config found" in m for m in error_messages)

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_report_error_logged(self, mock_build, mock_scanner_class, error_messages):
        mock_scanner_class.return_value.scan.side_effect = ReportError("disk full")

        assert main(["getallpartsize", "s3://bucket", "-j", "out.json"]) == 2
        assert any("Output error: disk full" in m for m in error_messages)

    @patch("partsize.cli.build_s3_client")
    def test_client_error_logged(self, mock_build, error_messages):
        mock_build.return_value = no_such_bucket_client()

        assert main(["getallpartsize", "s3://missing"]) == 1
        assert any("Scan of missing failed" in m for m in error_messages)

    @patch("partsize.cli.PartSizeScanner")
    @patch("partsize.cli.build_s3_client")
    def test_pagination_error_logged(self, mock_build, mock_scanner_class, error_messages):
        mock_scanner_class.return_value.scan.side_effect = PaginationError(message="stuck")

        assert main(["getallpartsize", "s3://bucket"]) == 1
        assert any("stuck" in m for m in error_messages)

    @patch("partsize.cli.build_s3_client")
    def test_success_logs_no_errors(self, mock_build, error_messages):
        mock_build.return_value = empty_bucket_client()

        assert main(["getallpartsize", "s3://bucket"]) == 0
        assert error_messages == []
