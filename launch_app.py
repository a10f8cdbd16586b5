#!/usr/bin/env python3
"""Motion detector launcher.

This script properly sets up the Python path and launches the frame loop.

Usage:
    python launch_app.py                     # Live camera
    python launch_app.py --video clip.avi    # Video file playback
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    from app.cli import main
    sys.exit(main())
