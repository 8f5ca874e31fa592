#!/usr/bin/env python3
"""
SKIFREE Launcher
=================
Run this script to start the game.
"""

from skifree.main import main

if __name__ == "__main__":
    main()
