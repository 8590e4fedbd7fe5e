# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Validation of team members against the members of the organisation"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ._config import ROSTER_SCHEMA, read_document, validate_schema, write_document
from ._helpers import clean_usernames, compare_two_lists, log_progress
from ._membership import MembershipDoc, read_membership

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


@dataclass
class MemberValidation:
    """A single team member and whether they are in the organisation"""

    username: str
    valid: bool


@dataclass
class TeamValidation:
    """Validation result for one root team or subteam"""

    name: str
    parent_team: str | None = None
    members: list[MemberValidation] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        """Number of members, as listed in the team"""
        return len(self.members)

    @property
    def invalid_members(self) -> list[str]:
        """Members which are not part of the organisation"""
        return [member.username for member in self.members if not member.valid]

    def to_dict(self) -> dict:
        """Report representation"""
        result: dict = {"name": self.name}
        if self.parent_team is not None:
            result["parent_team"] = self.parent_team
        result["member_count"] = self.member_count
        result["members"] = [
            {"username": member.username, "valid": member.valid} for member in self.members
        ]
        result["invalid_members"] = self.invalid_members
        return result


@dataclass
class ValidationSummary:
    """Aggregated numbers of a validation run"""

    total_unique_team_members: int = 0
    valid_members: int = 0
    invalid_members: int = 0
    teams_with_invalid_members: int = 0


@dataclass
class ValidationReport:  # pylint: disable=too-many-instance-attributes
    """Result of validating team members against the organisation roster"""

    validation_timestamp: str
    organization_members: list[str] = field(default_factory=list)
    root_teams: list[TeamValidation] = field(default_factory=list)
    subteams: list[TeamValidation] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)
    valid_members_list: list[str] = field(default_factory=list)
    invalid_members_list: list[str] = field(default_factory=list)

    @property
    def organization_member_count(self) -> int:
        """Number of members in the organisation"""
        return len(self.organization_members)

    @property
    def passed(self) -> bool:
        """Whether all team members are members of the organisation"""
        return not self.invalid_members_list

    def all_teams(self) -> list[TeamValidation]:
        """Root teams followed by subteams"""
        return self.root_teams + self.subteams

    def to_dict(self) -> dict:
        """Convert to the persisted report document"""
        return {
            "validation_timestamp": self.validation_timestamp,
            "organization_member_count": self.organization_member_count,
            "validation_results": {
                "root_teams": [team.to_dict() for team in self.root_teams],
                "subteams": [team.to_dict() for team in self.subteams],
            },
            "summary": {
                "total_unique_team_members": self.summary.total_unique_team_members,
                "valid_members": self.summary.valid_members,
                "invalid_members": self.summary.invalid_members,
                "teams_with_invalid_members": self.summary.teams_with_invalid_members,
            },
            "invalid_members_list": self.invalid_members_list,
        }


def parse_roster(doc, source: str = "<organisation members>") -> list[str]:
    """Return the organisation members of a loaded roster document"""
    validate_schema(source=source, data=doc, schema=ROSTER_SCHEMA)
    return list(doc["members"])


def read_roster(file: str) -> list[str]:
    """Read the file with all organisation members"""
    return parse_roster(read_document(file), source=file)


def _validate_team(
    name: str, members: list[str], invalid: set[str], parent_team: str | None = None
) -> TeamValidation:
    """Mark every member of a team as valid or invalid"""
    return TeamValidation(
        name=name,
        parent_team=parent_team,
        members=[
            MemberValidation(username=user, valid=user not in invalid)
            for user in clean_usernames(members)
        ],
    )


def validate(
    membership: MembershipDoc, roster: list[str], now: datetime | None = None
) -> ValidationReport:
    """Check all team members against the organisation members"""
    if now is None:
        now = datetime.now(timezone.utc)

    # All unique members of all teams
    team_members: set[str] = set()
    for team in membership.root_teams + membership.subteams:
        team_members.update(clean_usernames(team.members))

    # Split them into members of the org and unknown users
    _, valid, invalid = compare_two_lists(team_members, roster)
    invalid_set = set(invalid)

    report = ValidationReport(
        validation_timestamp=now.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT),
        organization_members=list(roster),
        valid_members_list=valid,
        invalid_members_list=invalid,
    )

    # Walk through the teams again, so every team reports its own members
    for team in membership.root_teams:
        report.root_teams.append(_validate_team(team.name, team.members, invalid_set))
    for sub in membership.subteams:
        report.subteams.append(
            _validate_team(sub.name, sub.members, invalid_set, parent_team=sub.parent_team)
        )

    report.summary = ValidationSummary(
        total_unique_team_members=len(team_members),
        valid_members=len(valid),
        invalid_members=len(invalid),
        teams_with_invalid_members=sum(
            1 for team in report.all_teams() if team.invalid_members
        ),
    )

    return report


def validate_files(members_file: str, roster_file: str, report_file: str) -> ValidationReport:
    """Validate the team members file against the organisation members file,
    and write the detailed report"""
    log_progress("Reading team members and organisation members...")
    membership = read_membership(members_file)
    roster = read_roster(roster_file)

    log_progress("Validating team members against organisation membership...")
    report = validate(membership, roster)
    if not report.summary.total_unique_team_members:
        logging.warning("No team members found in %s", members_file)

    log_progress("Writing validation report...")
    write_document(report_file, report.to_dict())
    log_progress("")
    logging.info("Detailed validation report saved to %s", report_file)

    if report.passed:
        logging.info(
            "All %s team members are valid organisation members", len(report.valid_members_list)
        )
    else:
        logging.error(
            "The following team members are not members of the organisation: %s",
            ", ".join(report.invalid_members_list),
        )

    return report
