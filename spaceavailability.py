#!/usr/bin/env python3
"""
Convenience entry point for running spaceavailability directly.

Usage: python spaceavailability.py [command] [options]
"""

from spaceavailability.cli.app import app

if __name__ == "__main__":
    app()
