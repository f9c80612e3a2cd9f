"""Interactive command-line quiz shell."""
