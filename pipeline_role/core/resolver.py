"""Select the mapping and role ARN a pipeline run is allowed to assume."""

from __future__ import annotations

import logging
from typing import Optional

from pipeline_role.core.errors import (
    AmbiguousAccount,
    AmbiguousMapping,
    ConflictingSelectors,
    MappingNotFound,
    NotMultiAccountMapping,
    RepositoryUnmapped,
    UnknownAccount,
)
from pipeline_role.core.matching import matches_any
from pipeline_role.core.models.mappings import (
    RepositoriesMappings,
    RepositoryMapping,
    RepositoryMappings,
)

logger = logging.getLogger(__name__)


def _names(keys) -> str:
    return ", ".join(keys)


def repository_mappings(
    all_mappings: RepositoriesMappings, repository: str
) -> RepositoryMappings:
    """Return the mapping table of ``repository``.

    Raises RepositoryUnmapped when the repository is missing or its table is
    empty.
    """
    mappings = all_mappings.get(repository)
    if not mappings:
        raise RepositoryUnmapped(
            f"repository {repository} is not mapped to any AWS account"
        )
    return mappings


def matching_mappings(mappings: RepositoryMappings, ref: str) -> RepositoryMappings:
    """Mappings with at least one ref pattern matching ``ref``, in document order."""
    return {
        name: mapping
        for name, mapping in mappings.items()
        if matches_any(mapping.refs, ref)
    }


def resolve_mapping(
    mappings: RepositoryMappings,
    ref: str,
    requested_name: Optional[str] = None,
) -> RepositoryMapping:
    """Pick exactly one mapping for ``ref``.

    Without ``requested_name`` exactly one mapping must match the ref. With it,
    the name is looked up in the whole table and ref patterns are ignored.
    """
    if requested_name:
        mapping = mappings.get(requested_name)
        if mapping is None:
            raise MappingNotFound(
                f"Mapping with name '{requested_name}' not found. "
                f"Available mappings are: [{_names(mappings)}]"
            )
        logger.debug("Using explicitly requested mapping '%s'", requested_name)
        return mapping.with_name(requested_name)

    candidates = matching_mappings(mappings, ref)

    if not candidates:
        raise AmbiguousMapping(
            f"No mapping found for this repo matching to ref {ref}, "
            f"please specify 'name' parameter. "
            f"Available mappings are: [{_names(mappings)}]"
        )
    if len(candidates) > 1:
        raise AmbiguousMapping(
            f"More than 1 mapping found for this repo matching to ref {ref}, "
            f"please specify 'name' parameter. "
            f"Available mappings are: [{_names(candidates)}]"
        )

    name, mapping = next(iter(candidates.items()))
    logger.debug("Ref %s matched mapping '%s'", ref, name)
    return mapping.with_name(name)


def select_role(
    mapping: RepositoryMapping,
    requested_account: Optional[str] = None,
    multi_account: bool = False,
) -> str:
    """Return the role ARN of ``mapping`` selected by the account selectors."""
    if requested_account and multi_account:
        raise ConflictingSelectors(
            "Both account and multi-account attributes are specified. "
            "Please only set one."
        )

    if multi_account:
        if not mapping.cross_account_role:
            raise NotMultiAccountMapping(
                f"The mapping '{mapping.name}' is not a multi-account mapping, "
                f"but multi-account was requested"
            )
        return mapping.cross_account_role

    accounts = list(mapping.roles)

    if not requested_account:
        if not accounts:
            raise AmbiguousAccount(
                f"The mapping '{mapping.name}' does not have any accounts assigned"
            )
        if len(accounts) != 1:
            raise AmbiguousAccount(
                f"The mapping '{mapping.name}' contains multiple accounts, "
                f"but account parameter was not set. Please specify the account. "
                f"Available accounts are: [{_names(accounts)}]"
            )
        return mapping.roles[accounts[0]]

    role_arn = mapping.roles.get(requested_account)
    if not role_arn:
        raise UnknownAccount(
            f"The mapping '{mapping.name}' does not have account "
            f"'{requested_account}' assigned. Please specify correct account. "
            f"Available accounts are: [{_names(accounts)}]"
        )
    return role_arn
