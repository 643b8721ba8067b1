"""Command line interface package for Prompt Library."""
