"""Main action step: resolve the pipeline role and hand it to the credential step."""

from __future__ import annotations

import json
import logging
from typing import Optional

from pipeline_role.configs.loader import (
    load_bootstrap_config,
    load_bootstrap_config_file,
    parse_repository_mappings,
)
from pipeline_role.core.errors import PipelineRoleError, UnsupportedEvent
from pipeline_role.core.models.mappings import AssumeRoleParameters, BootstrapConfig
from pipeline_role.core.resolver import repository_mappings, resolve_mapping, select_role
from pipeline_role.integrations.github.actions import STS_AUDIENCE, ActionsRuntime
from pipeline_role.providers.aws.credentials import (
    account_id_from_arn,
    configure_aws_credentials,
)
from pipeline_role.providers.aws.errors import (
    describe_aws_error,
    is_aws_error,
    is_credential_error,
)
from pipeline_role.providers.aws.mappings import fetch_mappings

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})

AVAILABLE_ROLES_VARIABLE = "AWS_AVAILABLE_ROLES"
ACCOUNT_ID_OUTPUT = "aws-account-id"

# Fixed parameters for the credential step
AWS_REGION = "eu-central-1"
MASK_AWS_ACCOUNT_ID = False
ROLE_DURATION_SECONDS = 3600


def run_action(
    actions: ActionsRuntime,
    mappings_fetcher=fetch_mappings,
    assume_role_step=configure_aws_credentials,
    config: Optional[BootstrapConfig] = None,
    config_file: Optional[str] = None,
) -> dict:
    context = actions.resolution_context()

    if context.event_name in PULL_REQUEST_EVENTS:
        raise UnsupportedEvent("pull requests are not supported (yet)")

    if config is None and config_file:
        config = load_bootstrap_config_file(config_file)
    elif config is None:
        config = load_bootstrap_config(actions.get_input("config", required=True))
    token = actions.get_id_token(STS_AUDIENCE)

    document = mappings_fetcher(config, token)
    mappings = parse_repository_mappings(
        context.repository, repository_mappings(document, context.repository)
    )
    mapping = resolve_mapping(mappings, context.ref, context.mapping_name)
    role_arn = select_role(mapping, context.account, context.multi_account)
    logger.info(
        "Repository %s at %s resolved to mapping '%s', role %s",
        context.repository,
        context.ref,
        mapping.name,
        role_arn,
    )

    actions.export_variable(
        AVAILABLE_ROLES_VARIABLE, json.dumps(mapping.roles, separators=(",", ":"))
    )

    params = AssumeRoleParameters(
        role_to_assume=role_arn,
        aws_region=AWS_REGION,
        mask_aws_account_id=MASK_AWS_ACCOUNT_ID,
        role_duration_seconds=ROLE_DURATION_SECONDS,
    )
    assume_role_step(params, actions)

    # The credential step may report another account id when other AWS
    # credentials are already present in the job environment.
    account_id = account_id_from_arn(role_arn)
    actions.set_output(ACCOUNT_ID_OUTPUT, account_id)

    return {
        "mapping": mapping.name,
        "role_arn": role_arn,
        "account_id": account_id,
        "roles": dict(mapping.roles),
    }


def failure_message(exc: BaseException) -> str:
    if isinstance(exc, PipelineRoleError):
        return str(exc)
    if is_aws_error(exc):
        return describe_aws_error(exc)
    return str(exc) or exc.__class__.__name__


def run(actions: Optional[ActionsRuntime] = None, **kwargs) -> Optional[dict]:
    """Run the action, reporting any failure instead of raising it.

    Returns the resolution summary, or None when the run failed.
    """
    actions = actions or ActionsRuntime()
    try:
        return run_action(actions, **kwargs)
    except Exception as exc:
        message = failure_message(exc)
        if is_credential_error(exc):
            logger.error("AWS rejected the pipeline credentials")
        logger.error("Action failed: %s", message, exc_info=exc)
        actions.set_failed(message)
        return None
