#!/usr/bin/env python3
"""
Pipeline Role CLI
Resolve the AWS role a GitHub Actions run may assume from a repository mapping
"""

import argparse
import json
import sys
from pathlib import Path

from pipeline_role.configs.loader import load_mapping_file, parse_repository_mappings
from pipeline_role.configs.schema.validator import mapping_document_issues
from pipeline_role.core.engine.action import run
from pipeline_role.core.engine.cleanup import run_cleanup
from pipeline_role.core.errors import PipelineRoleError
from pipeline_role.core.resolver import repository_mappings, resolve_mapping, select_role
from pipeline_role.integrations.github.actions import ActionsRuntime
from pipeline_role.providers.aws.credentials import account_id_from_arn

from .ui import (
    ICONS,
    VERSION,
    configure_logging,
    console,
    create_resolution_table,
    print_error,
    print_success,
)


def show_version():
    """Display version information."""
    console.print(f"[bold cyan]Pipeline Role[/bold cyan] v{VERSION}")


def command_run(args):
    actions = ActionsRuntime()
    run(actions, config_file=getattr(args, "config_file", None))
    return actions.exit_code


def command_cleanup(args):
    run_cleanup()
    return 0


def command_resolve(args):
    """Offline dry run against a local mapping document."""
    try:
        document = load_mapping_file(args.mappings)
        mappings = parse_repository_mappings(
            args.repository, repository_mappings(document, args.repository)
        )
        mapping = resolve_mapping(mappings, args.ref, args.name)
        role_arn = select_role(mapping, args.account, args.multi_account)
    except FileNotFoundError as exc:
        print_error(str(exc))
        return 1
    except PipelineRoleError as exc:
        print_error(str(exc))
        return 1

    console.print(
        create_resolution_table(
            {
                "repository": args.repository,
                "ref": args.ref,
                "mapping": mapping.name,
                "role_arn": role_arn,
                "account_id": account_id_from_arn(role_arn),
                "roles": mapping.roles,
            }
        )
    )
    return 0


def command_validate(args):
    """Validate a mapping document."""
    path = Path(args.mappings)
    if not path.exists():
        print_error(f"Mapping document not found: {path}")
        return 1

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        print_error(f"Failed to parse {path}: {exc}")
        return 1

    issues = mapping_document_issues(raw)
    if issues:
        console.print(f"[red]{ICONS['error']} Validation failed for {path}:[/red]")
        for issue in issues:
            console.print(f"  - {issue}")
        return 1

    repo_count = len(raw)
    mapping_count = sum(len(mappings) for mappings in raw.values())
    print_success(f"Mapping document is valid: {path}")
    console.print(f"  Repositories: {repo_count} | Mappings: {mapping_count}")
    return 0


COMMANDS = {
    "run": command_run,
    "cleanup": command_cleanup,
    "resolve": command_resolve,
    "validate": command_validate,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="pipeline-role",
        description="Pipeline Role - pick the AWS role for a GitHub Actions run",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # Main action step (reads INPUT_* and GITHUB_* from the environment)
  pipeline-role run

  # Post step
  pipeline-role cleanup

  # Dry run against a local mapping document
  pipeline-role resolve --mappings mappings.json --repository my-repo --ref refs/heads/main

  # Validate a mapping document
  pipeline-role validate mappings.json
        """,
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version information"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")
    run_parser = subparsers.add_parser("run", help="Resolve the role and configure AWS credentials")
    run_parser.add_argument(
        "--config-file",
        default=None,
        help="Read the bootstrap config from a JSON/YAML file instead of the config input",
    )
    subparsers.add_parser("cleanup", help="Clear variables exported by run")

    resolve = subparsers.add_parser("resolve", help="Resolve a role from a local mapping file")
    resolve.add_argument("--mappings", required=True, help="Path to the mapping JSON document")
    resolve.add_argument("--repository", required=True, help="Repository name (without owner)")
    resolve.add_argument("--ref", required=True, help="Git ref, e.g. refs/heads/main")
    resolve.add_argument("--name", default=None, help="Mapping name override")
    resolve.add_argument("--account", default=None, help="Account name to select")
    resolve.add_argument(
        "--multi-account",
        action="store_true",
        help="Select the mapping's cross-account role",
    )

    validate = subparsers.add_parser("validate", help="Validate a mapping document")
    validate.add_argument("mappings", help="Path to the mapping JSON document")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.version:
        show_version()
        return 0

    configure_logging(args.verbose)
    return COMMANDS[args.command or "run"](args)


def run_cli():
    return main()


if __name__ == "__main__":
    sys.exit(main())
