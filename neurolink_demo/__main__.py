#!/usr/bin/env python3
"""Entry point for the NeuroLink demo CLI."""

import sys
from neurolink_demo.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
