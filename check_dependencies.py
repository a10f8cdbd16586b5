#!/usr/bin/env python3
"""Check if all required dependencies are installed."""

import sys
from importlib import import_module

REQUIRED_PACKAGES = [
    ('cv2', 'opencv-python'),
    ('numpy', 'numpy'),
    ('yaml', 'PyYAML'),
    ('loguru', 'loguru'),
    ('jsonschema', 'jsonschema'),
]


def check_dependencies():
    """Report each required package with its version; True when none are missing."""
    missing = []

    for module_name, package_name in REQUIRED_PACKAGES:
        try:
            mod = import_module(module_name)
        except ImportError:
            missing.append(package_name)
            print(f"[MISSING] {package_name:15} NOT FOUND")
            continue
        print(f"[OK] {package_name:15} {getattr(mod, '__version__', 'unknown')}")

    if missing:
        print(f"\nInstall with:\n   pip install {' '.join(missing)}")
        return False
    print(f"\nAll {len(REQUIRED_PACKAGES)} required packages are installed.")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_dependencies() else 1)
