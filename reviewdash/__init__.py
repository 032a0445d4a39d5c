"""Review dashboard client for the transaction-classification backend."""

__version__ = "0.1.0"
