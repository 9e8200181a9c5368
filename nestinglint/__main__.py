"""
Entry point for running the nesting lint as a module.

Usage:
    python -m nestinglint check tree.json
    python -m nestinglint --help
"""

import sys
from nestinglint.cli import main

if __name__ == "__main__":
    sys.exit(main())
