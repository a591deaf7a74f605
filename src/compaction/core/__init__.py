"""Core utilities: errors, logging, terminal output, formatting."""
