"""Command-line interface for channelsieve."""
