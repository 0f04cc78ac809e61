"""HTTP API for WorkSync."""
