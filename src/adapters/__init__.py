"""Adapters: HTTP pipeline, response wrappers, API resources and exporters."""
