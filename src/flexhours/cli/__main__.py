#!/usr/bin/env python3
"""
CLI entry point for flexhours.cli module.

This allows running: python -m flexhours.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
