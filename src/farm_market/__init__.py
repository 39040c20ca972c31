"""Farm Market: a marketplace backend connecting farmers and buyers."""

__version__ = "0.1.0"
