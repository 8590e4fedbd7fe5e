# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Generate the team members template from the team structure, and validate
team members against the members of the organisation"""

import argparse
import logging
import sys

from . import __version__
from ._config import (
    ENV_ORG_MEMBERS_FILE,
    ENV_REPORT_FILE,
    ENV_TEAM_MEMBERS_FILE,
    ENV_TEAMS_CONFIG_FILE,
    ORG_MEMBERS_FILE,
    REPORT_FILE,
    TEAM_MEMBERS_FILE,
    TEAMS_CONFIG_FILE,
    resolve_path,
)
from ._errors import TeamMembersError
from ._helpers import configure_logger, log_progress
from ._membership import generate_membership_file
from ._validate import validate_files
from ._views import member_mapping_text, summary_text, team_breakdown

# Main parser with root-level flags
parser = argparse.ArgumentParser(
    description=__doc__, formatter_class=argparse.ArgumentDefaultsHelpFormatter
)
parser.add_argument("--version", action="version", version="GitHub Team Members " + __version__)

# Initiate first-level subcommands
subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

# Common flags, usable for all effective subcommands
common_flags = argparse.ArgumentParser(add_help=False)  # No automatic help to avoid duplication
common_flags.add_argument("-v", "--verbose", action="store_true", help="Get INFO logging output")
common_flags.add_argument("-vv", "--debug", action="store_true", help="Get DEBUG logging output")
common_flags.add_argument(
    "-d",
    "--dir",
    default=".",
    help="Directory in which relative file paths are looked up",
)

# Generate command
parser_generate = subparsers.add_parser(
    "generate",
    help="Generate the team members template from the team structure, keeping existing members",
    parents=[common_flags],
)
parser_generate.add_argument(
    "-c",
    "--config",
    help=(
        f"Team structure file. Can also be set via {ENV_TEAMS_CONFIG_FILE} "
        f"[default: {TEAMS_CONFIG_FILE}]"
    ),
)
parser_generate.add_argument(
    "-o",
    "--output",
    help=(
        f"Team members file to write. Can also be set via {ENV_TEAM_MEMBERS_FILE} "
        f"[default: {TEAM_MEMBERS_FILE}]"
    ),
)
parser_generate.add_argument(
    "--output-format",
    help="Output format for the summary",
    choices=["json", "text"],
    default="text",
)

# Validate command
parser_validate = subparsers.add_parser(
    "validate",
    help="Validate that all team members are members of the organisation",
    parents=[common_flags],
)
parser_validate.add_argument(
    "-t",
    "--teams",
    help=(
        f"Team members file. Can also be set via {ENV_TEAM_MEMBERS_FILE} "
        f"[default: {TEAM_MEMBERS_FILE}]"
    ),
)
parser_validate.add_argument(
    "-m",
    "--members",
    help=(
        f"Organisation members file. Can also be set via {ENV_ORG_MEMBERS_FILE} "
        f"[default: {ORG_MEMBERS_FILE}]"
    ),
)
parser_validate.add_argument(
    "-r",
    "--report",
    help=(
        f"Validation report to write. Can also be set via {ENV_REPORT_FILE} "
        f"[default: {REPORT_FILE}]"
    ),
)
parser_validate.add_argument(
    "-b", "--breakdown", action="store_true", help="Show detailed team-by-team breakdown"
)
parser_validate.add_argument(
    "-u",
    "--users",
    action="store_true",
    help="Show member-to-teams mapping (username : TEAM A,TEAM B...)",
)


def _generate(args: argparse.Namespace) -> int:
    """Run the generate command"""
    config_file = resolve_path(args.config, ENV_TEAMS_CONFIG_FILE, TEAMS_CONFIG_FILE, args.dir)
    output_file = resolve_path(args.output, ENV_TEAM_MEMBERS_FILE, TEAM_MEMBERS_FILE, args.dir)
    logging.info("Config file: %s, output file: %s", config_file, output_file)

    stats = generate_membership_file(config_file=config_file, output_file=output_file)
    stats.print_changes(output_file=output_file, output=args.output_format)

    return 0


def _validate(args: argparse.Namespace) -> int:
    """Run the validate command"""
    members_file = resolve_path(args.teams, ENV_TEAM_MEMBERS_FILE, TEAM_MEMBERS_FILE, args.dir)
    roster_file = resolve_path(args.members, ENV_ORG_MEMBERS_FILE, ORG_MEMBERS_FILE, args.dir)
    report_file = resolve_path(args.report, ENV_REPORT_FILE, REPORT_FILE, args.dir)
    logging.info(
        "Team members file: %s, organisation members file: %s, validation report: %s",
        members_file,
        roster_file,
        report_file,
    )

    report = validate_files(
        members_file=members_file, roster_file=roster_file, report_file=report_file
    )

    print(summary_text(report))
    if args.breakdown:
        print()
        print(team_breakdown(report))
    if args.users:
        print()
        print(member_mapping_text(report))

    if not report.passed:
        print()
        print(f"Check the detailed report in {report_file}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main function"""

    # Process arguments
    args = parser.parse_args(argv)

    configure_logger(verbose=args.verbose, debug=args.debug)

    try:
        if args.command == "generate":
            return _generate(args)
        # Validate command
        return _validate(args)
    except TeamMembersError as exc:
        log_progress("")  # clear progress
        logging.critical(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
