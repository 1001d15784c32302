"""Settings, database, security and error types."""
