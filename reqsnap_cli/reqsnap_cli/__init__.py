"""reqsnap command-line interface."""
