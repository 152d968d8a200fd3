#!/usr/bin/env python3
"""
DUNJY KRAWL Launcher
=====================
Run this script to start the game.
"""

from dunjy_krawl.main import main

if __name__ == "__main__":
    main()
