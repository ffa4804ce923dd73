"""
Entry point for running the layerconf CLI as a module.

Usage: python -m layerconf.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
