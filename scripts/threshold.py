#!/usr/bin/env python3
"""
Launcher for the thresholding command-line tool.
Usage:
	python scripts/threshold.py image.png otsu
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from thresholding.cli import main


if __name__ == '__main__':
	sys.exit(main())
