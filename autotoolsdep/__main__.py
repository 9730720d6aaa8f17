"""
Entry point for running autotoolsdep CLI as a module.

Usage: python -m autotoolsdep [command] [options]
"""

from autotoolsdep.cli.parser import main

if __name__ == "__main__":
    main()
