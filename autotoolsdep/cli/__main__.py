"""
Entry point for running the autotoolsdep CLI as a module.

Usage: python -m autotoolsdep.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
