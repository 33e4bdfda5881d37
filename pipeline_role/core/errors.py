"""Errors raised while resolving which AWS role a pipeline run may assume.

Every error is terminal for the current run. They are raised as soon as the
problem is detected and only caught by the action entrypoint, which reports the
message as the run's failure reason.
"""

from __future__ import annotations


class PipelineRoleError(Exception):
    """Base class for all role resolution failures."""


class UnsupportedEvent(PipelineRoleError):
    """The run was triggered by an event we refuse to handle."""


class InvalidConfig(PipelineRoleError):
    """Bootstrap configuration is missing or incomplete."""


class MappingDocumentError(PipelineRoleError):
    """The mapping document is not valid JSON or has the wrong shape."""


class IdentityTokenUnavailable(PipelineRoleError):
    """The CI runner did not expose an OIDC token endpoint."""


class TokenRefreshExhausted(PipelineRoleError):
    """Identity/credential refresh kept failing after all retries."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class RepositoryUnmapped(PipelineRoleError):
    """Repository is absent from the mapping document or maps to nothing."""


class AmbiguousMapping(PipelineRoleError):
    """Zero or several mappings match the ref and no name was given."""


class MappingNotFound(PipelineRoleError):
    """An explicitly requested mapping name does not exist."""


class ConflictingSelectors(PipelineRoleError):
    """Both a named account and multi-account were requested."""


class AmbiguousAccount(PipelineRoleError):
    """Mapping has several accounts and no selector was given."""


class NotMultiAccountMapping(PipelineRoleError):
    """Multi-account requested but the mapping has no cross-account role."""


class UnknownAccount(PipelineRoleError):
    """Named account is not part of the mapping's role set."""


__all__ = [
    "PipelineRoleError",
    "UnsupportedEvent",
    "InvalidConfig",
    "MappingDocumentError",
    "IdentityTokenUnavailable",
    "TokenRefreshExhausted",
    "RepositoryUnmapped",
    "AmbiguousMapping",
    "MappingNotFound",
    "ConflictingSelectors",
    "AmbiguousAccount",
    "NotMultiAccountMapping",
    "UnknownAccount",
]
