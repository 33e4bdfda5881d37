"""Assume the selected pipeline role and export its credentials to the job."""

from __future__ import annotations

import logging

from pipeline_role.core.models.mappings import AssumeRoleParameters
from pipeline_role.integrations.github.actions import STS_AUDIENCE
from pipeline_role.providers.aws.auth import WebIdentityCredentials

logger = logging.getLogger(__name__)

CREDENTIAL_VARIABLES = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
)


def account_id_from_arn(role_arn: str) -> str:
    """Return the account id segment of an IAM ARN, or "" if there is none."""
    parts = role_arn.split(":")
    return parts[4] if len(parts) > 4 else ""


def configure_aws_credentials(
    params: AssumeRoleParameters,
    actions,
    credentials_factory=WebIdentityCredentials,
) -> dict:
    """Assume ``params.role_to_assume`` and export the session to later steps."""
    token = actions.get_id_token(STS_AUDIENCE)
    credentials = credentials_factory(
        role_arn=params.role_to_assume,
        role_session_name=params.role_session_name,
        web_identity_token=token,
        duration_seconds=params.role_duration_seconds,
        region_name=params.aws_region,
    ).refresh()

    actions.add_mask(credentials["aws_secret_access_key"])
    actions.add_mask(credentials["aws_session_token"])
    if params.mask_aws_account_id:
        actions.add_mask(account_id_from_arn(params.role_to_assume))

    actions.export_variable("AWS_ACCESS_KEY_ID", credentials["aws_access_key_id"])
    actions.export_variable("AWS_SECRET_ACCESS_KEY", credentials["aws_secret_access_key"])
    actions.export_variable("AWS_SESSION_TOKEN", credentials["aws_session_token"])
    actions.export_variable("AWS_REGION", params.aws_region)
    actions.export_variable("AWS_DEFAULT_REGION", params.aws_region)

    logger.info("Configured AWS credentials for role %s", params.role_to_assume)
    return credentials


def cleanup_aws_credentials(actions) -> None:
    for name in CREDENTIAL_VARIABLES:
        actions.export_variable(name, "")
