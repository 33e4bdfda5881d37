"""
Pipeline Role
Resolve which AWS IAM role a CI pipeline run may assume
"""

__version__ = "1.0.0"

from pipeline_role.core.engine import run, run_cleanup

__all__ = ["run", "run_cleanup", "__version__"]
