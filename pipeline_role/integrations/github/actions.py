"""GitHub Actions runtime adapter.

All reads of the workflow environment and all writes back to it (exported
variables, step outputs, workflow commands) go through ``ActionsRuntime`` so
the rest of the package never touches process-wide state directly.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from urllib import error, parse, request

from pipeline_role.core.errors import IdentityTokenUnavailable, InvalidConfig
from pipeline_role.core.models.mappings import ResolutionContext

logger = logging.getLogger(__name__)

STS_AUDIENCE = "sts.amazonaws.com"


def _input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def _escape_message(value) -> str:
    return (
        str(value)
        .replace("%", "%25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
    )


def _escape_property(value) -> str:
    return (
        _escape_message(value)
        .replace(":", "%3A")
        .replace(",", "%2C")
    )


class ActionsRuntime:
    def __init__(self, environ=None, stdout=None):
        self.environ = os.environ if environ is None else environ
        self.stdout = stdout or sys.stdout
        self.exit_code = 0

    # -- inputs / context --

    def get_input(self, name: str, required: bool = False) -> str:
        value = self.environ.get(_input_env_name(name), "").strip()
        if required and not value:
            raise InvalidConfig(f"Input required and not supplied: {name}")
        return value

    def get_boolean_input(self, name: str) -> bool:
        return self.get_input(name) == "true"

    @property
    def event_name(self) -> str:
        return self.environ.get("GITHUB_EVENT_NAME", "")

    @property
    def repository(self) -> str:
        """Repository name without the owner, e.g. ``my-repo``."""
        full_name = self.environ.get("GITHUB_REPOSITORY", "")
        return full_name.split("/", 1)[-1]

    @property
    def ref(self) -> str:
        return self.environ.get("GITHUB_REF", "")

    def resolution_context(self) -> ResolutionContext:
        return ResolutionContext(
            repository=self.repository,
            ref=self.ref,
            mapping_name=self.get_input("name") or None,
            account=self.get_input("account") or None,
            multi_account=self.get_boolean_input("multi-account"),
            event_name=self.event_name,
        )

    # -- file commands --

    def _append_file_command(self, env_var: str, name: str, value: str) -> bool:
        path = self.environ.get(env_var)
        if not path:
            return False
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        return True

    def export_variable(self, name: str, value: str) -> None:
        # Outside a runner there is no GITHUB_ENV; only this process sees it.
        self.environ[name] = value
        self._append_file_command("GITHUB_ENV", name, value)

    def set_output(self, name: str, value: str) -> None:
        if not self._append_file_command("GITHUB_OUTPUT", name, value):
            self.issue_command("set-output", value, name=name)

    # -- workflow commands --

    def issue_command(self, command: str, message: str = "", **properties) -> None:
        props = ",".join(
            f"{key}={_escape_property(val)}" for key, val in properties.items()
        )
        head = f"::{command} {props}" if props else f"::{command}"
        self.stdout.write(f"{head}::{_escape_message(message)}\n")

    def add_mask(self, secret: str) -> None:
        # The runner masks line by line, so each line of a multi-line value
        # is registered on its own.
        for line in str(secret or "").splitlines():
            if line.strip():
                self.issue_command("add-mask", line)

    def set_failed(self, message: str) -> None:
        self.exit_code = 1
        self.issue_command("error", message)

    # -- OIDC --

    def get_id_token(self, audience: str = STS_AUDIENCE, timeout: int = 10) -> str:
        """Request an OIDC token for ``audience`` from the runner."""
        url = self.environ.get("ACTIONS_ID_TOKEN_REQUEST_URL")
        bearer = self.environ.get("ACTIONS_ID_TOKEN_REQUEST_TOKEN")
        if not url or not bearer:
            raise IdentityTokenUnavailable(
                "Unable to get ACTIONS_ID_TOKEN_REQUEST_URL or "
                "ACTIONS_ID_TOKEN_REQUEST_TOKEN env variable. "
                "Make sure the workflow has 'id-token: write' permission."
            )

        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}audience={parse.quote(audience, safe='')}"
        req = request.Request(
            url,
            headers={"Authorization": f"Bearer {bearer}", "Accept": "application/json"},
            method="GET",
        )

        try:
            with request.urlopen(req, timeout=timeout) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except error.URLError as exc:
            raise IdentityTokenUnavailable(f"Failed to get ID token: {exc}") from exc
        except ValueError as exc:
            raise IdentityTokenUnavailable(
                f"Response body of the ID token request is not valid JSON: {exc}"
            ) from exc

        if not isinstance(payload, dict):
            raise IdentityTokenUnavailable("Response json body is not an object")

        token = payload.get("value")
        if not token:
            raise IdentityTokenUnavailable("Response json body does not have ID token field")

        self.add_mask(token)
        logger.debug("Obtained OIDC token for audience %s", audience)
        return token
