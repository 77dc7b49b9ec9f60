"""Core components: configuration, logging, tracing, exceptions."""
