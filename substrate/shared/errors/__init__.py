"""Unified error hierarchy for substrate.

All errors inherit from SubstrateError. Every one of them is a usage error:
none is caught or retried inside the package, they surface at the call site.
"""

from __future__ import annotations


class SubstrateError(Exception):
    """Base error for all substrate exceptions."""

    def __init__(self, message: str, code: str = "SUBSTRATE_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Lifecycle errors --


class AlreadyConfiguredError(SubstrateError):
    """configure() was called a second time."""

    def __init__(self, message: str = "Cannot configure the substrate twice") -> None:
        super().__init__(message, code="ALREADY_CONFIGURED")


class NotConfiguredError(SubstrateError):
    """An operation was invoked before configure()."""

    def __init__(
        self,
        message: str = "Substrate must be configured before being used, call configure() first",
    ) -> None:
        super().__init__(message, code="NOT_CONFIGURED")


class NoActiveContextError(SubstrateError):
    """No bundle is installed for the current execution context."""

    def __init__(self, operation: str = "") -> None:
        self.operation = operation
        where = f"{operation}() called " if operation else "called "
        super().__init__(
            f"No active context: {where}outside inherit(), from_scratch(), fork() or scope()",
            code="NO_ACTIVE_CONTEXT",
        )


# -- Argument errors --


class InvalidPatchArgumentError(SubstrateError):
    """A tag patch was neither a callable, a mapping, nor None."""

    def __init__(self, argument_type: str, message: str = "") -> None:
        self.argument_type = argument_type
        super().__init__(
            message
            or f"Tags should be patched with either a callable or a mapping, got {argument_type}",
            code="INVALID_PATCH",
        )


class SinkContractError(SubstrateError):
    """A sink passed to configure() lacks required emission methods."""

    def __init__(self, sink_name: str, missing: list[str]) -> None:
        self.sink_name = sink_name
        self.missing = missing
        super().__init__(
            f"The {sink_name} sink is missing required methods: {', '.join(missing)}",
            code="SINK_CONTRACT",
        )


__all__ = [
    "AlreadyConfiguredError",
    "InvalidPatchArgumentError",
    "NoActiveContextError",
    "NotConfiguredError",
    "SinkContractError",
    "SubstrateError",
]
