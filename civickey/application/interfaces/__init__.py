"""Application ports (Protocols implemented by infrastructure)."""
