"""Background jobs: dramatiq actors, scheduler process and health endpoint."""
