"""Tax Genie command-line interface."""
