#!/usr/bin/env python
"""
Simple wrapper script to run the ring_to_tv bridge.
"""

import os
import sys
import asyncio

# Add the current directory to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ring_to_tv.__main__ import configure_logging, main

if __name__ == "__main__":
    configure_logging()
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
