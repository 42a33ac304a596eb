#!/usr/bin/env python3
"""
Incomplete Multipart Upload Size Reporter

Run this script to list the uploaded parts of every incomplete multipart
upload in an S3-compatible bucket, with the total part count and size.

Usage:
    python run.py getallpartsize s3://bucket                 # Use config.json / env
    python run.py getallpartsize s3://bucket -e URL -i ID -k SECRET
    python run.py getallpartsize s3://bucket -q              # Total only
    python run.py getallpartsize s3://bucket -j parts.json   # Also write JSON
    python run.py getallpartsize s3://bucket --encoding-type url
"""

import sys
from partsize.cli import main

if __name__ == "__main__":
    sys.exit(main())
