"""Core configuration, logging and error types for the Catalog Service."""
