from pathlib import Path

import pipeline_role
import pipeline_role.app.cli.main as cli_main


def test_pyproject_script_points_to_cli_main():
    pyproject = Path("pyproject.toml").read_text(encoding="utf-8")
    assert 'pipeline-role = "pipeline_role.app.cli.main:main"' in pyproject


def test_cli_exposes_run_cli_alias():
    assert callable(cli_main.run_cli)


def test_package_exports_action_entrypoints():
    assert callable(pipeline_role.run)
    assert callable(pipeline_role.run_cleanup)
