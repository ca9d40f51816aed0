"""Command line interface for anchorpack."""
