class PipelineError(Exception):
    """Base exception for pipeline failures."""


class ParseExecutionError(PipelineError):
    """Raised when loading or merging fails."""


class RegistrySyntaxError(PipelineError, ValueError):
    """Raised when a registry or session document violates the list structure."""


class UnresolvedReferenceError(PipelineError, LookupError):
    """Raised by callers that choose to escalate an unresolved name."""

    def __init__(self, name: str, kind=None):
        self.name = name
        self.kind = kind
        suffix = f" (kind filter: {kind})" if kind else ""
        super().__init__(f"Unresolved reference: {name!r}{suffix}")
