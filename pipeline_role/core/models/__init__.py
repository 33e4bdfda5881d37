"""Role resolution data model exports."""

from pipeline_role.core.models.mappings import (
    AssumeRoleParameters,
    BootstrapConfig,
    RepositoriesMappings,
    RepositoryMapping,
    RepositoryMappings,
    ResolutionContext,
)

__all__ = [
    "AssumeRoleParameters",
    "BootstrapConfig",
    "RepositoriesMappings",
    "RepositoryMapping",
    "RepositoryMappings",
    "ResolutionContext",
]
