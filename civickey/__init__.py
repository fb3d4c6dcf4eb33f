"""CivicKey: multi-tenant municipal services platform."""

__version__ = "1.0.0"
