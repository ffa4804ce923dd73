"""
Entry point for running the layerconf CLI as a module.

Usage: python -m layerconf [command] [options]
"""

from layerconf.cli.parser import main

if __name__ == "__main__":
    main()
