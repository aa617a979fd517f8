"""Infrastructure: configuration, logging and the database pool."""
