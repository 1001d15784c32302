"""Request logging, rate limiting, authentication and website scope."""
