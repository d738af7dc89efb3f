"""Agent Health API: liveness, readiness, and aggregate health reporting."""
