#!/usr/bin/env python3
"""
SWARM_SIEGE Launcher
=====================
Run this script to start the game.
"""

from swarm_siege.main import main

if __name__ == "__main__":
    main()
