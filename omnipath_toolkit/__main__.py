"""
Entry point for running the package as a module.

Usage:
    python -m omnipath_toolkit paths --config configs/network.yaml
"""

from .cli import main

if __name__ == "__main__":
    main()
