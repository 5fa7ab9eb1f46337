"""Exception types shared by the engine, the steps and the CLI."""

from __future__ import annotations


class ConfigurationError(EnvironmentError):
    """Missing settings or an inconsistent transition table. Always fatal."""


class StepProtocolError(RuntimeError):
    """A step broke the emit-exactly-one-declared-event contract."""


class PayloadError(ValueError):
    """A collaborator reply did not carry a usable tagged JSON payload."""


class InputClosed(EOFError):
    """The human side of the conversation has no more input."""


class ResourceUnavailable(RuntimeError):
    """A mandatory learning resource could not be fetched or read."""


class CollaboratorError(RuntimeError):
    """The language-model backend failed to produce a reply."""
