# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Dataclass and functions for statistics about a generated team members file"""

import json
from dataclasses import dataclass, field

from ._helpers import clean_usernames


@dataclass
class MembershipChanges:  # pylint: disable=too-many-instance-attributes
    """Dataclass holding information about the generated team members file"""

    newly_created: bool = False
    root_teams: int = 0
    subteams: int = 0
    root_team_members: int = 0
    subteam_members: int = 0
    added_teams: list[str] = field(default_factory=list)
    removed_teams: list[str] = field(default_factory=list)
    lost_members: dict[str, list[str]] = field(default_factory=dict)
    team_members: dict[str, list[str]] = field(default_factory=dict)

    # --------------------------------------------------------------------------
    # Teams
    # --------------------------------------------------------------------------
    def add_team(self, team: str) -> None:
        """Team is new in the configuration"""
        self.added_teams.append(team)

    def remove_team(self, team: str, members: list[str]) -> None:
        """Team is not configured anymore. Document the members which were
        dropped with it. A team listed multiple times is documented once, with
        the members of its last entry"""
        if team not in self.removed_teams:
            self.removed_teams.append(team)
        if members := clean_usernames(members):
            self.lost_members[team] = members
        else:
            self.lost_members.pop(team, None)

    def document_team(self, team: str, members: list[str]) -> None:
        """Team is part of the generated file"""
        self.team_members[team] = list(members)

    # --------------------------------------------------------------------------
    # Output
    # --------------------------------------------------------------------------
    def changes_into_dict(self) -> dict:
        """Convert dataclass to dict, and only use fields that are not empty"""
        return {
            key: value
            for key, value in self.__dict__.items()
            # Counters are always relevant
            if value or isinstance(value, int) and not isinstance(value, bool)
        }

    def print_changes(self, output_file: str, output: str = "text") -> None:
        """Print the changes, either in pretty format or as JSON"""
        if output == "json":
            print(json.dumps(self.changes_into_dict(), indent=2))
            return

        text = (
            "Generated team members template:\n"
            f"- Root teams: {self.root_teams} (with {self.root_team_members} total members)\n"
            f"- Subteams: {self.subteams} (with {self.subteam_members} total members)\n"
            f"- Output file: {output_file}\n"
        )
        if self.team_members:
            text += "\nPreview of generated structure:\n"
            for team, members in self.team_members.items():
                text += f"  - {team}: {len(members)} members\n"
                if usernames := clean_usernames(members):
                    text += f"      {', '.join(usernames)}\n"
        if self.newly_created:
            text += "\n🆕 The file has been created\n"
        if self.added_teams:
            text += "\n➕ Added teams:\n"
            for item in self.added_teams:
                text += f"  - {item}\n"
        if self.removed_teams:
            text += "\n❌ Removed teams:\n"
            for item in self.removed_teams:
                text += f"  - {item}\n"
                if item in self.lost_members:
                    text += f"    dropped members: {', '.join(self.lost_members[item])}\n"

        print(text.strip())
