"""Local job application tracker with CSV import and export."""

__version__ = "0.1.0"
