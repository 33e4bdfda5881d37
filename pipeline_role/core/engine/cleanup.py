"""Post step: clear everything the main step exported."""

import logging

from pipeline_role.core.engine.action import AVAILABLE_ROLES_VARIABLE
from pipeline_role.integrations.github.actions import ActionsRuntime
from pipeline_role.providers.aws.credentials import cleanup_aws_credentials

logger = logging.getLogger(__name__)


def run_cleanup(actions=None, credentials_cleanup=cleanup_aws_credentials):
    actions = actions or ActionsRuntime()
    actions.export_variable(AVAILABLE_ROLES_VARIABLE, "")
    credentials_cleanup(actions)
    logger.info("Cleared pipeline role variables")
