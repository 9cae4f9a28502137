"""Infrastructure layer: persistence, auth, email, storage and HTTP API."""
