"""Fetch the repository mapping document from S3."""

from __future__ import annotations

import logging

from pipeline_role.configs.loader import load_mapping_document
from pipeline_role.core.models.mappings import BootstrapConfig
from pipeline_role.providers.aws.auth import WebIdentityCredentials

logger = logging.getLogger(__name__)

BOOTSTRAP_SESSION_NAME = "prepare-pipeline"


def read_mapping_object(s3_client, bucket: str, key: str) -> bytes:
    response = s3_client.get_object(Bucket=bucket, Key=key)
    body = response["Body"]
    try:
        return body.read()
    finally:
        body.close()


def fetch_mappings(
    config: BootstrapConfig,
    web_identity_token: str,
    credentials_factory=WebIdentityCredentials,
) -> dict:
    """Assume the bootstrap role and load ``s3://bucket/key`` as a raw document."""
    credentials = credentials_factory(
        role_arn=config.role_arn,
        role_session_name=BOOTSTRAP_SESSION_NAME,
        web_identity_token=web_identity_token,
    )
    s3 = credentials.client("s3")

    logger.info(
        "Reading mapping document s3://%s/%s", config.mapping_bucket, config.mapping_key
    )
    body = read_mapping_object(s3, config.mapping_bucket, config.mapping_key)
    return load_mapping_document(body)
