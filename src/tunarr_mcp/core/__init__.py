"""Core services: configuration, logging, errors and validation."""
