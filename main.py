#!/usr/bin/env python3
"""
csv-safe entry point.

Runs the csv-safe command line from a source checkout; an installed copy
provides the same command as ``csv-safe``.
"""

import sys

from csv_safe.cli import main


if __name__ == "__main__":
    sys.exit(main())
