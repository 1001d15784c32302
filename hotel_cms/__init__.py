"""Multi-tenant hotel website content management API."""

__version__ = "1.0.0"
