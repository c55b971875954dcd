#!/usr/bin/env python3
"""
Knurl - execute a request document from the command line.

Run this with a request file (and optionally an environment file).
"""

import sys

from knurl.cli import main


if __name__ == "__main__":
    sys.exit(main())
