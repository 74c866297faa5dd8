#!/usr/bin/env python3
"""
Main entry point for the example DaZeus plugin
"""

import sys

from dazeus.cli import main

if __name__ == "__main__":
    sys.exit(main())
