#!/usr/bin/env python3
"""
Golden Book - rules core developer console

Thin entry point around goldenbook.cli:
- no arguments: interactive dev console over a demo world
- ``simulate SECONDS [STEP]``: print the curse cycle timeline

To run: python main.py
"""
import sys

from goldenbook.cli import run, simulate

if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "simulate":
        seconds = float(sys.argv[2]) if len(sys.argv) > 2 else 120.0
        step = float(sys.argv[3]) if len(sys.argv) > 3 else 1.0
        simulate(seconds, step)
    else:
        run()
