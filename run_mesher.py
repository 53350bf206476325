#!/usr/bin/env python3
"""
Simple wrapper script to run the bitmap region mesher.

Runs the tool straight from a checkout, no install needed.
"""

import sys
from pathlib import Path

# Add this directory to the path so we can import region_mesher
sys.path.insert(0, str(Path(__file__).parent))

from region_mesher import main

if __name__ == "__main__":
    main()
