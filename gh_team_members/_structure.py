# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Parsing of the team hierarchy as defined in the Terraform variables"""

import logging
from dataclasses import dataclass, field
from typing import Any

from ._config import TEAM_STRUCTURE_SCHEMA, read_document, validate_schema
from ._errors import ConfigNotFoundError, SchemaError


@dataclass
class SubteamDef:
    """A team nested below a root team"""

    name: str
    description: str | None = None
    privacy: str | None = None


@dataclass
class TeamDef:
    """A top-level team and its subteams"""

    name: str
    description: str | None = None
    privacy: str | None = None
    subteams: list[SubteamDef] = field(default_factory=list)


@dataclass
class TeamStructure:
    """Normalised team hierarchy, in the order of the configuration"""

    root_teams: list[TeamDef] = field(default_factory=list)

    def subteam_keys(self) -> list[tuple[str, str]]:
        """Return (parent team, subteam) pairs of all subteams"""
        return [(team.name, sub.name) for team in self.root_teams for sub in team.subteams]


def _check_unique(names: list[str], source: str, context: str) -> None:
    """Team names must not be defined multiple times"""
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)

    if duplicates:
        raise SchemaError(
            f"{source} defines {context} multiple times. This is disallowed. "
            f"Affected names: {', '.join(duplicates)}"
        )


def parse_team_structure(doc: Any, source: str = "<team structure>") -> TeamStructure:
    """Turn a loaded team structure document into a TeamStructure"""
    validate_schema(source=source, data=doc, schema=TEAM_STRUCTURE_SCHEMA)

    structure = TeamStructure()
    for team_cfg in doc["root_teams"]:
        team = TeamDef(
            name=team_cfg["name"],
            description=team_cfg.get("description"),
            privacy=team_cfg.get("privacy"),
        )
        # Subteams are optional
        for sub_cfg in team_cfg.get("subteams") or []:
            team.subteams.append(
                SubteamDef(
                    name=sub_cfg["name"],
                    description=sub_cfg.get("description"),
                    privacy=sub_cfg.get("privacy"),
                )
            )
        _check_unique(
            [sub.name for sub in team.subteams], source, f"subteams of team '{team.name}'"
        )
        structure.root_teams.append(team)

    _check_unique([team.name for team in structure.root_teams], source, "root teams")

    logging.debug(
        "Parsed %s root teams and %s subteams from %s",
        len(structure.root_teams),
        len(structure.subteam_keys()),
        source,
    )
    return structure


def read_team_structure(file: str) -> TeamStructure:
    """Read and parse the team structure configuration file"""
    doc = read_document(file, not_found_error=ConfigNotFoundError)
    return parse_team_structure(doc, source=file)
