"""Core infrastructure: configuration, exceptions, storage, logging, CLI."""
