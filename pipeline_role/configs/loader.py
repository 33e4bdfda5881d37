"""Load the bootstrap config and the repository mapping document."""

import json
from pathlib import Path

import yaml

from pipeline_role.configs.schema.validator import (
    validate_bootstrap_config,
    validate_repository_mappings,
)
from pipeline_role.core.errors import InvalidConfig, MappingDocumentError
from pipeline_role.core.models.mappings import BootstrapConfig, RepositoryMapping


def _to_bootstrap_config(raw):
    raw = validate_bootstrap_config(raw)
    return BootstrapConfig(
        role_arn=raw["roleArn"],
        mapping_bucket=raw["mappingBucket"],
        mapping_key=raw["mappingKey"],
    )


def load_bootstrap_config(text):
    """Parse the ``config`` input. JSON is accepted since it is valid YAML."""
    if not text or not text.strip():
        raise InvalidConfig("Input required and not supplied: config")
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidConfig(f"config is not valid JSON/YAML: {exc}") from exc
    return _to_bootstrap_config(raw)


def load_bootstrap_config_file(path):
    path = Path(path)
    if not path.exists():
        raise InvalidConfig(f"config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidConfig(f"config file could not be read: {path}: {exc}") from exc
    return load_bootstrap_config(text)


def parse_repository_mappings(repository, mappings):
    """Validate one repository's raw table and build its ``RepositoryMapping`` entries.

    Other repositories in the shared document are not inspected.
    """
    mappings = validate_repository_mappings(repository, mappings)
    return {name: RepositoryMapping.from_dict(mapping) for name, mapping in mappings.items()}


def load_mapping_document(body):
    """Decode and parse a mapping document fetched as bytes or text.

    Returns the raw JSON object. Repository tables are validated on lookup by
    ``parse_repository_mappings``.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MappingDocumentError(f"mapping document is not UTF-8: {exc}") from exc

    try:
        raw = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MappingDocumentError(f"mapping document is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise MappingDocumentError("mapping document must be an object")
    return raw


def load_mapping_file(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"mapping document not found: {path}")

    with open(path, "rb") as f:
        return load_mapping_document(f.read())
