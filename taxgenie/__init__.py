"""Tax Genie - personal income tax estimates and savings tips."""

__version__ = "0.3.0"
