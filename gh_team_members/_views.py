# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Textual views on a validation report"""

from ._helpers import unique_in_order
from ._membership import subteam_label
from ._validate import TeamValidation, ValidationReport


def _team_lines(team: TeamValidation) -> list[str]:
    """Members of a team with their validity"""
    if not team.members:
        return ["    No members"]

    lines = []
    for member in team.members:
        if member.valid:
            lines.append(f"    ✓ {member.username}")
        else:
            lines.append(f"    ✗ {member.username} (not in org)")
    return lines


def team_breakdown(report: ValidationReport) -> str:
    """Team-by-team listing of all members and whether they are valid"""
    lines = ["Team-by-Team Validation Breakdown:", "=" * 36, "", "Root Teams:"]
    for team in report.root_teams:
        lines.append(f"  Team: {team.name}")
        lines.extend(_team_lines(team))
        lines.append("")

    lines.append("Subteams:")
    for team in report.subteams:
        lines.append(f"  Subteam: {team.name} (parent: {team.parent_team})")
        lines.extend(_team_lines(team))
        lines.append("")

    return "\n".join(lines).rstrip()


def member_teams_mapping(report: ValidationReport) -> dict[str, list[str]]:
    """Map each team member to the teams they belong to, sorted by username.
    Subteams are named together with their parent team"""
    mapping: dict[str, list[str]] = {}
    for team in report.all_teams():
        if team.parent_team is None:
            label = team.name
        else:
            label = subteam_label(team.parent_team, team.name)
        for member in team.members:
            mapping.setdefault(member.username, []).append(label)

    return {user: unique_in_order(mapping[user]) for user in sorted(mapping)}


def members_without_team(report: ValidationReport) -> list[str]:
    """Organisation members which are not in any team"""
    in_teams = {member.username for team in report.all_teams() for member in team.members}
    return sorted(set(report.organization_members) - in_teams)


def member_mapping_text(report: ValidationReport) -> str:
    """Member-to-teams listing, followed by organisation members without team"""
    invalid = set(report.invalid_members_list)

    lines = ["Member-to-Teams Mapping:", "=" * 24, ""]
    for user, teams in member_teams_mapping(report).items():
        line = f"{user} : {','.join(teams)}"
        if user in invalid:
            line += " (not in org)"
        lines.append(line)

    lines.extend(["", "Organization members not in any team:"])
    for user in members_without_team(report):
        lines.append(f"  {user} : (no teams assigned)")

    return "\n".join(lines)


def summary_text(report: ValidationReport) -> str:
    """Summary of the validation, including the verdict"""
    summary = report.summary
    lines = [
        "Validation Summary:",
        "=" * 19,
        f"Total unique team members: {summary.total_unique_team_members}",
        f"Valid members (in org): {summary.valid_members}",
        f"Invalid members (not in org): {summary.invalid_members}",
        f"Teams with invalid members: {summary.teams_with_invalid_members}",
        "",
    ]
    if report.passed:
        lines.append("✓ Validation completed successfully - all team members are valid!")
    else:
        lines.append("Invalid members found:")
        lines.extend(f"  - {user}" for user in report.invalid_members_list)
        lines.extend(
            [
                "",
                "✗ Validation failed - some team members are not organization members!",
            ]
        )

    return "\n".join(lines)
