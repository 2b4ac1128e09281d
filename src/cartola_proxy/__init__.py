"""Read-through proxy computing live Cartola FC league standings."""

__version__ = "0.1.0"
