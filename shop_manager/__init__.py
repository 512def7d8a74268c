"""Shop Manager: flat-file inventory, sales and service tracking for a small shop."""

__version__ = "1.0.0"
