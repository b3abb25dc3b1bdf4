#!/usr/bin/env python3
"""Allow running as ``python -m qbt_filesync``."""

import sys

from .main import main

sys.exit(main())
