"""Core configuration, logging, errors and TLS."""
