"""gridcalc -- a small in-memory spreadsheet with an infix formula engine."""

__version__ = "0.1.0"
