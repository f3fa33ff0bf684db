"""In-memory pallet warehouse inventory tracker."""

__version__ = "0.1.0"
