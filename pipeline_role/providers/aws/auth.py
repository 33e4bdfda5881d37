"""Web identity (OIDC) credentials for AssumeRole workflows."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from pipeline_role.core.errors import TokenRefreshExhausted
from pipeline_role.core.retry import RetryingRefresher
from pipeline_role.providers.aws.clients import get_client

logger = logging.getLogger(__name__)


def default_refresher() -> RetryingRefresher:
    return RetryingRefresher(retry_on=(BotoCoreError, ClientError))


class WebIdentityCredentials:
    """Exchange an OIDC token for temporary role credentials via STS.

    The STS call is wrapped in a ``RetryingRefresher``; when every attempt
    fails the last SDK error is chained to a ``TokenRefreshExhausted``.
    """

    def __init__(
        self,
        role_arn: str,
        role_session_name: str,
        web_identity_token: str,
        duration_seconds: Optional[int] = None,
        region_name: Optional[str] = None,
        refresher: Optional[RetryingRefresher] = None,
        client_factory: Callable = get_client,
    ):
        self.role_arn = role_arn
        self.role_session_name = role_session_name
        self.web_identity_token = web_identity_token
        self.duration_seconds = duration_seconds
        self.region_name = region_name
        self.refresher = refresher or default_refresher()
        self.client_factory = client_factory

    def _assume_role(self) -> dict:
        sts = self.client_factory("sts", region_name=self.region_name)
        kwargs = {
            "RoleArn": self.role_arn,
            "RoleSessionName": self.role_session_name,
            "WebIdentityToken": self.web_identity_token,
        }
        if self.duration_seconds:
            kwargs["DurationSeconds"] = self.duration_seconds

        response = sts.assume_role_with_web_identity(**kwargs)
        raw = response["Credentials"]
        return {
            "aws_access_key_id": raw["AccessKeyId"],
            "aws_secret_access_key": raw["SecretAccessKey"],
            "aws_session_token": raw["SessionToken"],
        }

    def refresh(self) -> dict:
        logger.info("Assuming role %s with web identity", self.role_arn)
        try:
            return self.refresher.refresh(self._assume_role)
        except (BotoCoreError, ClientError) as exc:
            attempts = self.refresher.attempts
            raise TokenRefreshExhausted(
                f"Unable to assume role {self.role_arn} with web identity "
                f"after {attempts} attempt(s): {exc}",
                attempts=attempts,
            ) from exc

    def client(self, service_name: str, region_name: Optional[str] = None):
        """Create a client for ``service_name`` using refreshed credentials."""
        return self.client_factory(
            service_name,
            credentials=self.refresh(),
            region_name=region_name or self.region_name,
        )
