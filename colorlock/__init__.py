"""
Color Lock - Daily color-grid puzzle mechanics.

The rules live in colorlock.engine. This package adds the replay driver,
its Qt worker thread, settings and debug rendering used by the command
line harness in main.py.
"""

__version__ = "0.1.0"
