"""scoregen: generate Csound scores three ways and perform them."""

__version__ = "0.1.0"
