#!/usr/bin/env python3
"""
Convenience entry point for flock recording.

Usage:
    python record.py                         # Record the reference preset
    python record.py --preset murmuration    # Record another preset
    python record.py --resume reference      # Resume interrupted recording
    python record.py --list                  # List all recordings
"""

from tools.record import main

if __name__ == "__main__":
    main()
