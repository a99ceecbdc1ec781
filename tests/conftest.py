"""Shared pytest configuration."""

import os

# Widgets and web views need a platform plugin even on headless machines.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
