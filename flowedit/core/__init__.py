"""Application-wide services (settings)."""
