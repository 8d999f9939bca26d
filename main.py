#!/usr/bin/env python3
"""
synapse-acl -- Command-line access to Synapse projects, teams, users and ACLs.

Usage:
  python main.py project create "My Project"
  python main.py project get 9876543
  python main.py team get "My Team"
  python main.py user get jdoe
  python main.py acl show 9876543
  python main.py perms get 9876543 3412345
  python main.py perms set 9876543 3412345 --preset can-edit
  python main.py perms set 9876543 3412345 --permission READ --permission DOWNLOAD
  python main.py perms set 9876543 3412345 --clear

Environment variables:
  SYNAPSE_USERNAME   Login username (required).
  SYNAPSE_PASSWORD   Login password (required).
  SYNAPSE_API_KEY    API key, only used for signature-authenticated requests.
  SYNAPSE_API_URL    Base URL (default: https://repo-prod.prod.sagebase.org).
"""

import argparse
import json
import logging
import sys
from typing import Optional

from core.client import SynapseClient
from core.models import PERMISSION_SETS, ApiResult, Permission


def _print_result(result: ApiResult) -> int:
    """Print result.data as JSON, or the error line. Returns the exit status."""
    if not result.ok:
        err = result.error
        status = f" (HTTP {err.status_code})" if err.status_code else ""
        print(f"  [!] {err.kind.value}: {err.message}{status}", file=sys.stderr)
        return 1
    print(json.dumps(result.data, indent=2, sort_keys=True))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synapse-acl",
        description="Manage Synapse projects, teams, users and entity permissions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py team create "Data Curators"
  python main.py perms set 9876543 "3412345" --preset admin
  python main.py perms set 9876543 3412345 --clear
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    groups = parser.add_subparsers(dest="group", metavar="COMMAND")

    project = groups.add_parser("project", help="Create, get or delete projects")
    project_cmds = project.add_subparsers(dest="action", required=True)
    project_cmds.add_parser("create", help="Create a project").add_argument("name")
    project_cmds.add_parser("get", help="Get a project by ID").add_argument("id")
    project_cmds.add_parser("delete", help="Delete a project by ID").add_argument("id")

    team = groups.add_parser("team", help="Create, get or delete teams")
    team_cmds = team.add_subparsers(dest="action", required=True)
    team_cmds.add_parser("create", help="Create a team").add_argument("name")
    team_cmds.add_parser("get", help="Get a team by ID or exact name").add_argument("id_or_name")
    team_cmds.add_parser("delete", help="Delete a team by ID").add_argument("id")

    user = groups.add_parser("user", help="Look up users")
    user_cmds = user.add_subparsers(dest="action", required=True)
    user_cmds.add_parser("get", help="Get a user by ID or exact username").add_argument("id_or_username")

    acl = groups.add_parser("acl", help="Show an entity's access-control list")
    acl_cmds = acl.add_subparsers(dest="action", required=True)
    acl_cmds.add_parser("show", help="Print the full ACL").add_argument("entity_id")

    perms = groups.add_parser("perms", help="Read or change one principal's permissions")
    perms_cmds = perms.add_subparsers(dest="action", required=True)
    perms_get = perms_cmds.add_parser("get", help="Print a principal's permissions")
    perms_get.add_argument("entity_id")
    perms_get.add_argument("principal_id")

    perms_set = perms_cmds.add_parser("set", help="Replace a principal's permissions")
    perms_set.add_argument("entity_id")
    perms_set.add_argument("principal_id")
    choice = perms_set.add_mutually_exclusive_group(required=True)
    choice.add_argument(
        "--preset",
        choices=sorted(PERMISSION_SETS),
        help="Named permission set",
    )
    choice.add_argument(
        "--permission",
        action="append",
        choices=[p.value for p in Permission],
        metavar="PERMISSION",
        help="Individual permission; repeat for several (%(choices)s)",
    )
    choice.add_argument(
        "--clear",
        action="store_true",
        help="Remove the principal from the ACL",
    )
    return parser


def _permissions_from(args: argparse.Namespace) -> list[str]:
    if args.clear:
        return []
    if args.preset:
        return [p.value for p in PERMISSION_SETS[args.preset]]
    return list(args.permission)


def run(args: argparse.Namespace, client: SynapseClient) -> int:
    group, action = args.group, args.action

    if group == "project":
        if action == "create":
            return _print_result(client.create_project(args.name))
        if action == "get":
            return _print_result(client.get_project(args.id))
        return _print_result(client.delete_project(args.id))

    if group == "team":
        if action == "create":
            return _print_result(client.create_team(args.name))
        if action == "get":
            return _print_result(client.get_team(args.id_or_name))
        return _print_result(client.delete_team(args.id))

    if group == "user":
        return _print_result(client.get_user(args.id_or_username))

    if group == "acl":
        return _print_result(client.get_entity_acl(args.entity_id))

    if action == "get":
        return _print_result(client.get_permissions(args.entity_id, args.principal_id))

    result = client.set_permissions(args.entity_id, args.principal_id, _permissions_from(args))
    if not result.ok:
        return _print_result(result)
    # The PUT response only confirms the write; read back to show what applied.
    return _print_result(client.get_permissions(args.entity_id, args.principal_id))


def main(argv: Optional[list[str]] = None, client: Optional[SynapseClient] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if not args.group:
        parser.print_help()
        return 0

    return run(args, client or SynapseClient())


if __name__ == "__main__":
    sys.exit(main())
