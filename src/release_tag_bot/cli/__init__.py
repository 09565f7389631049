"""Command line interface for release-tag-bot."""
