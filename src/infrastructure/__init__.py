"""Infrastructure adapters: HTTP transport, registry clients, settings."""
