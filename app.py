#!/usr/bin/env python3
"""
Launcher script for the quiz mixer command line
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from yaminabe.cli import main

if __name__ == "__main__":
    sys.exit(main())
