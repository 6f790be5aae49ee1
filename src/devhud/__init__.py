"""Status dashboard core: alert derivation and log filter state."""

__version__ = "0.1.0"
