"""Config schema validation helpers."""

from pipeline_role.core.errors import InvalidConfig, MappingDocumentError


def validate_bootstrap_config(raw):
    if not isinstance(raw, dict):
        raise InvalidConfig("config must be an object")

    if not raw.get("roleArn") or not raw.get("mappingBucket") or not raw.get("mappingKey"):
        raise InvalidConfig(
            "roleArn, mappingBucket or mappingKey is not specified in config"
        )

    return raw


def repository_mapping_issues(repository, mappings):
    """Return the problems found in one repository's mapping table."""
    if not isinstance(mappings, dict):
        return [f"{repository}: mappings must be an object"]

    issues = []
    for name, mapping in mappings.items():
        where = f"{repository}.{name}"
        if not isinstance(mapping, dict):
            issues.append(f"{where}: mapping must be an object")
            continue

        refs = mapping.get("refs")
        if not isinstance(refs, list) or not refs:
            issues.append(f"{where}: refs must be a non-empty list")
        elif not all(isinstance(ref, str) for ref in refs):
            issues.append(f"{where}: refs must contain only strings")

        roles = mapping.get("roles", {})
        if not isinstance(roles, dict):
            issues.append(f"{where}: roles must be an object")
        elif not all(isinstance(arn, str) for arn in roles.values()):
            issues.append(f"{where}: role ARNs must be strings")

        cross_account_role = mapping.get("crossAccountRole")
        if cross_account_role is not None and not isinstance(cross_account_role, str):
            issues.append(f"{where}: crossAccountRole must be a string")

    return issues


def mapping_document_issues(raw):
    """Return a list of human-readable problems found in a mapping document."""
    if not isinstance(raw, dict):
        return ["mapping document must be an object"]

    issues = []
    for repository, mappings in raw.items():
        issues.extend(repository_mapping_issues(repository, mappings))
    return issues


def validate_repository_mappings(repository, mappings):
    issues = repository_mapping_issues(repository, mappings)
    if issues:
        raise MappingDocumentError("invalid mapping document: " + "; ".join(issues))
    return mappings
