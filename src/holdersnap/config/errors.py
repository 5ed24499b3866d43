"""Errors raised while reading snapshot configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment setting such as ``BATCH_SIZE`` holds an unusable value."""


class MissingConfigurationError(ConfigurationError):
    """A required API key or RPC URL is unset or blank; the run aborts before any request."""
