"""GitHub Actions runtime integration."""

from pipeline_role.integrations.github.actions import ActionsRuntime, STS_AUDIENCE

__all__ = ["ActionsRuntime", "STS_AUDIENCE"]
