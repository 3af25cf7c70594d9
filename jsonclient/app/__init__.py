"""Application-level ownership of the shared HTTP engine."""
