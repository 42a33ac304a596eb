"""S3 client factory.

Builds the boto3 client used to list incomplete multipart uploads on an
S3-compatible endpoint. Credentials left unset fall through to boto3's
default credential chain; anonymous mode sends unsigned requests, which
only public buckets accept.
"""

import boto3
from botocore import UNSIGNED
from botocore.client import Config

from partsize.models import ConnectionConfig


def build_s3_client(config: ConnectionConfig):
    """Build a boto3 S3 client for the given connection configuration.

    Args:
        config: Connection settings; see partsize.config for how they are
               merged from file, environment, and command line.

    Returns:
        A boto3 S3 client.
    """
    boto_config = Config(
        signature_version=UNSIGNED if config.anonymous else "s3v4",
        s3={"addressing_style": config.addressing_style},
    )

    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        aws_session_token=config.aws_session_token,
        region_name=config.region_name,
        config=boto_config,
    )
