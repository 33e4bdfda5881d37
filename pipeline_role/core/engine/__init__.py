"""Action step exports."""

from pipeline_role.core.engine.action import run, run_action
from pipeline_role.core.engine.cleanup import run_cleanup

__all__ = ["run", "run_action", "run_cleanup"]
