"""HR portal command-line interface."""
