"""Command line interface for hubactions."""
