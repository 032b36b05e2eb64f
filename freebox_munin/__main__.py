"""
Main entry point for the freebox_munin package.

Allows running the plugin as: python -m freebox_munin <metric> [config]
"""

import sys

from freebox_munin.cli import main

if __name__ == "__main__":
    sys.exit(main())
