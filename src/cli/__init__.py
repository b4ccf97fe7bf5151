"""`omeda` command line interface."""
