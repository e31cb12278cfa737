"""Coffee Calculator: ingredient costing and margin-based drink pricing."""

__version__ = "0.1.0"
