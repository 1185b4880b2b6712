"""TCP client and server exchanging length-prefixed messages and packets."""

__version__ = "0.1.0"

__all__ = ["__version__"]