"""internrank - rank internship applicants from a CSV export."""

__version__ = "0.1.0"
