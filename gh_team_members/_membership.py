# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Generation of the team membership template, preserving existing members"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from ._config import MEMBERSHIP_SCHEMA, read_document, validate_schema, write_document
from ._helpers import log_progress
from ._stats import MembershipChanges
from ._structure import TeamStructure, read_team_structure

# Key under which the first release of the generator stored the root teams
LEGACY_ROOT_TEAMS_KEY = "root-teams"


@dataclass
class RootTeamMembers:
    """Members of a root team"""

    name: str
    members: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Document representation"""
        return {"name": self.name, "members": list(self.members)}


@dataclass
class SubteamMembers:
    """Members of a subteam, identified by parent team and name"""

    name: str
    parent_team: str
    members: list[str] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the subteam"""
        return (self.parent_team, self.name)

    def to_dict(self) -> dict:
        """Document representation"""
        return {"name": self.name, "parent_team": self.parent_team, "members": list(self.members)}


@dataclass
class MembershipDoc:
    """Which users belong to which root team and subteam"""

    root_teams: list[RootTeamMembers] = field(default_factory=list)
    subteams: list[SubteamMembers] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Document representation, as persisted"""
        return {
            "root_teams": [team.to_dict() for team in self.root_teams],
            "subteams": [team.to_dict() for team in self.subteams],
        }


def subteam_label(parent_team: str, name: str) -> str:
    """Human readable name of a subteam"""
    return f"{name} (parent: {parent_team})"


# ------------------------------------------------------------------------------
# Reading and writing
# ------------------------------------------------------------------------------
def parse_membership(doc: Any, source: str = "<team members>") -> MembershipDoc:
    """Turn a loaded membership document into a MembershipDoc"""
    if (
        isinstance(doc, dict)
        and "root_teams" not in doc
        and LEGACY_ROOT_TEAMS_KEY in doc
    ):
        logging.warning(
            "%s uses the outdated key '%s'. It will be read as 'root_teams'",
            source,
            LEGACY_ROOT_TEAMS_KEY,
        )
        doc = dict(doc)
        doc["root_teams"] = doc.pop(LEGACY_ROOT_TEAMS_KEY)

    validate_schema(source=source, data=doc, schema=MEMBERSHIP_SCHEMA)

    membership = MembershipDoc()
    for team in doc.get("root_teams", []):
        membership.root_teams.append(
            RootTeamMembers(name=team["name"], members=list(team.get("members") or []))
        )
    for team in doc.get("subteams", []):
        membership.subteams.append(
            SubteamMembers(
                name=team["name"],
                parent_team=team["parent_team"],
                members=list(team.get("members") or []),
            )
        )

    return membership


def read_membership(file: str) -> MembershipDoc:
    """Read and parse a team membership file"""
    return parse_membership(read_document(file), source=file)


def write_membership(membership: MembershipDoc, file: str) -> None:
    """Persist the team membership file, replacing previous content"""
    write_document(file, membership.to_dict())


# ------------------------------------------------------------------------------
# Generation
# ------------------------------------------------------------------------------
def build_template(structure: TeamStructure) -> MembershipDoc:
    """Create a membership document without any members from the team structure"""
    membership = MembershipDoc()
    for team in structure.root_teams:
        membership.root_teams.append(RootTeamMembers(name=team.name))
    for team in structure.root_teams:
        for sub in team.subteams:
            membership.subteams.append(SubteamMembers(name=sub.name, parent_team=team.name))

    return membership


def reconcile(template: MembershipDoc, previous: MembershipDoc) -> MembershipDoc:
    """Carry over the members of the previous document into the template.
    Teams which are not part of the template are dropped together with their
    members"""
    # Lookup tables for the existing members
    root_members: dict[str, list[str]] = {}
    for team in previous.root_teams:
        if team.name in root_members:
            logging.warning(
                "Root team '%s' is listed multiple times in the existing team members. "
                "Only the last entry is kept",
                team.name,
            )
        root_members[team.name] = team.members

    sub_members: dict[tuple[str, str], list[str]] = {}
    for sub in previous.subteams:
        if sub.key in sub_members:
            logging.warning(
                "Subteam '%s' is listed multiple times in the existing team members. "
                "Only the last entry is kept",
                subteam_label(sub.parent_team, sub.name),
            )
        sub_members[sub.key] = sub.members

    result = MembershipDoc()
    for team in template.root_teams:
        result.root_teams.append(
            RootTeamMembers(name=team.name, members=list(root_members.get(team.name, [])))
        )
    for sub in template.subteams:
        result.subteams.append(
            SubteamMembers(
                name=sub.name,
                parent_team=sub.parent_team,
                members=list(sub_members.get(sub.key, [])),
            )
        )

    return result


def generate(structure: TeamStructure, previous: MembershipDoc | None = None) -> MembershipDoc:
    """Create the membership document for a team structure. If a previous
    version exists, the members of teams that still exist are preserved"""
    template = build_template(structure)
    if previous is None:
        return template

    return reconcile(template, previous)


def compute_changes(new: MembershipDoc, previous: MembershipDoc | None) -> MembershipChanges:
    """Collect statistics about the generated document compared to the previous one"""
    stats = MembershipChanges(
        root_teams=len(new.root_teams),
        subteams=len(new.subteams),
        root_team_members=sum(len(team.members) for team in new.root_teams),
        subteam_members=sum(len(team.members) for team in new.subteams),
    )
    for team in new.root_teams:
        stats.document_team(team.name, team.members)
    for sub in new.subteams:
        stats.document_team(subteam_label(sub.parent_team, sub.name), sub.members)

    if previous is None:
        stats.newly_created = True
        return stats

    new_roots = {team.name for team in new.root_teams}
    old_roots = {team.name for team in previous.root_teams}
    new_subs = {team.key for team in new.subteams}
    old_subs = {team.key for team in previous.subteams}

    for team in new.root_teams:
        if team.name not in old_roots:
            stats.add_team(team.name)
    for sub in new.subteams:
        if sub.key not in old_subs:
            stats.add_team(subteam_label(sub.parent_team, sub.name))

    for team in previous.root_teams:
        if team.name not in new_roots:
            stats.remove_team(team.name, team.members)
    for sub in previous.subteams:
        if sub.key not in new_subs:
            stats.remove_team(subteam_label(sub.parent_team, sub.name), sub.members)

    return stats


def generate_membership_file(config_file: str, output_file: str) -> MembershipChanges:
    """Regenerate the team members file from the team structure configuration"""
    log_progress("Reading team structure...")
    structure = read_team_structure(config_file)

    previous = None
    if os.path.exists(output_file):
        logging.info("Found existing team members file %s. Preserving current members", output_file)
        previous = read_membership(output_file)
    else:
        logging.info("No team members file found at %s, creating a new one", output_file)

    log_progress("Generating team members...")
    membership = generate(structure, previous)
    stats = compute_changes(membership, previous)

    for team, members in stats.lost_members.items():
        logging.warning(
            "Team '%s' is no longer configured. Its members are dropped: %s",
            team,
            ", ".join(members),
        )

    log_progress("Writing team members...")
    write_membership(membership, output_file)
    log_progress("")

    return stats
