"""Core: configuration, errors, schemas, domain entities and interfaces."""
