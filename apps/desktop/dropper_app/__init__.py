"""Dropper desktop app and command line tools."""
