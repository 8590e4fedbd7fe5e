# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for generating the team members template"""

import json
import logging

import pytest

from gh_team_members._errors import (
    ConfigNotFoundError,
    MalformedInputError,
    SchemaError,
    WriteError,
)
from gh_team_members._membership import (
    MembershipDoc,
    RootTeamMembers,
    SubteamMembers,
    build_template,
    compute_changes,
    generate,
    generate_membership_file,
    parse_membership,
    read_membership,
    reconcile,
)
from gh_team_members._structure import parse_team_structure


def test_build_template(structure_doc):
    """Root teams first, then subteams per root team, all without members"""
    membership = build_template(parse_team_structure(structure_doc))

    assert membership.to_dict() == {
        "root_teams": [
            {"name": "Platform", "members": []},
            {"name": "Product", "members": []},
        ],
        "subteams": [
            {"name": "Infra", "parent_team": "Platform", "members": []},
            {"name": "Docs", "parent_team": "Platform", "members": []},
            {"name": "Docs", "parent_team": "Product", "members": []},
        ],
    }


def test_generate_without_previous():
    """A new template has empty member lists"""
    structure = parse_team_structure(
        {"root_teams": [{"name": "Platform", "subteams": [{"name": "Infra"}]}]}
    )
    assert generate(structure).to_dict() == {
        "root_teams": [{"name": "Platform", "members": []}],
        "subteams": [{"name": "Infra", "parent_team": "Platform", "members": []}],
    }


def test_regenerate_keeps_members_and_drops_removed_teams():
    """Members survive, removed subteams disappear with their members"""
    previous = MembershipDoc(
        root_teams=[RootTeamMembers(name="Platform", members=["alice"])],
        subteams=[SubteamMembers(name="Infra", parent_team="Platform", members=["bob"])],
    )
    structure = parse_team_structure({"root_teams": [{"name": "Platform"}]})

    assert generate(structure, previous).to_dict() == {
        "root_teams": [{"name": "Platform", "members": ["alice"]}],
        "subteams": [],
    }


def test_members_are_copied_verbatim(structure_doc):
    """Order and duplicates of member lists are not touched"""
    previous = MembershipDoc(root_teams=[RootTeamMembers("Product", ["zoe", "adam", "zoe"])])
    membership = generate(parse_team_structure(structure_doc), previous)

    assert membership.root_teams[1].members == ["zoe", "adam", "zoe"]
    # The result does not share lists with the previous document
    membership.root_teams[1].members.append("new")
    assert previous.root_teams[0].members == ["zoe", "adam", "zoe"]


def test_subteams_are_matched_by_parent_and_name(structure_doc):
    """Subteams with the same name under different parents keep their own members"""
    previous = MembershipDoc(
        subteams=[
            SubteamMembers(name="Docs", parent_team="Platform", members=["alice"]),
            SubteamMembers(name="Docs", parent_team="Product", members=["bob"]),
        ]
    )
    membership = generate(parse_team_structure(structure_doc), previous)

    docs = {sub.parent_team: sub.members for sub in membership.subteams if sub.name == "Docs"}
    assert docs == {"Platform": ["alice"], "Product": ["bob"]}


def test_subteam_moved_to_other_parent_loses_members():
    """A subteam under a new parent is a new team"""
    previous = MembershipDoc(
        root_teams=[RootTeamMembers("A"), RootTeamMembers("B")],
        subteams=[SubteamMembers(name="X", parent_team="A", members=["alice"])],
    )
    structure = parse_team_structure(
        {"root_teams": [{"name": "A"}, {"name": "B", "subteams": [{"name": "X"}]}]}
    )

    assert generate(structure, previous).subteams == [
        SubteamMembers(name="X", parent_team="B", members=[])
    ]


def test_duplicate_previous_entries_last_wins(caplog):
    """Duplicated entries in the previous document are ambiguous, the last one wins"""
    previous = MembershipDoc(
        root_teams=[RootTeamMembers("A", ["first"]), RootTeamMembers("A", ["second"])]
    )
    template = MembershipDoc(root_teams=[RootTeamMembers("A")])

    with caplog.at_level(logging.WARNING):
        result = reconcile(template, previous)

    assert result.root_teams[0].members == ["second"]
    assert "listed multiple times" in caplog.text


def test_parse_membership_defaults():
    """Missing keys and null member lists are read as empty"""
    membership = parse_membership({"root_teams": [{"name": "A", "members": None}]})
    assert membership == MembershipDoc(root_teams=[RootTeamMembers("A", [])], subteams=[])
    assert parse_membership({}) == MembershipDoc()


def test_parse_membership_legacy_key(caplog):
    """The outdated 'root-teams' key is still understood"""
    with caplog.at_level(logging.WARNING):
        membership = parse_membership({"root-teams": [{"name": "A", "members": ["alice"]}]})

    assert membership.root_teams == [RootTeamMembers("A", ["alice"])]
    assert "root-teams" in caplog.text


def test_parse_membership_invalid():
    """Subteams need a parent team"""
    with pytest.raises(SchemaError):
        parse_membership({"subteams": [{"name": "X", "members": []}]})
    with pytest.raises(SchemaError):
        parse_membership({"root_teams": [{"name": "A", "members": "alice"}]})


# ------------------------------------------------------------------------------
# Generating files
# ------------------------------------------------------------------------------
def test_generate_file_and_regenerate(tmp_path, write_json):
    """Manually added members survive the removal of another team"""
    config = tmp_path / "teams.tfvars.json"
    output = tmp_path / "team_members.tfvars.json"
    write_json(config, {"root_teams": [{"name": "Platform", "subteams": [{"name": "Infra"}]}]})

    stats = generate_membership_file(str(config), str(output))
    assert stats.newly_created
    assert json.loads(output.read_text(encoding="UTF-8")) == {
        "root_teams": [{"name": "Platform", "members": []}],
        "subteams": [{"name": "Infra", "parent_team": "Platform", "members": []}],
    }

    # Add a member by hand, then remove the subteam from the structure
    data = json.loads(output.read_text(encoding="UTF-8"))
    data["root_teams"][0]["members"] = ["alice"]
    data["subteams"][0]["members"] = ["bob"]
    write_json(output, data)
    write_json(config, {"root_teams": [{"name": "Platform"}]})

    stats = generate_membership_file(str(config), str(output))
    assert json.loads(output.read_text(encoding="UTF-8")) == {
        "root_teams": [{"name": "Platform", "members": ["alice"]}],
        "subteams": [],
    }
    assert stats.removed_teams == ["Infra (parent: Platform)"]
    assert stats.lost_members == {"Infra (parent: Platform)": ["bob"]}
    assert stats.root_team_members == 1


def test_generate_is_idempotent(tmp_path, write_json, structure_doc):
    """Running twice without changes produces byte-identical files"""
    config = write_json(tmp_path / "teams.tfvars.json", structure_doc)
    output = tmp_path / "team_members.tfvars.json"

    generate_membership_file(str(config), str(output))
    data = json.loads(output.read_text(encoding="UTF-8"))
    data["subteams"][2]["members"] = ["carol", "dave"]
    write_json(output, data)

    generate_membership_file(str(config), str(output))
    first = output.read_bytes()
    stats = generate_membership_file(str(config), str(output))

    assert output.read_bytes() == first
    assert not stats.added_teams
    assert not stats.removed_teams


def test_generate_reports_added_teams(tmp_path, write_json):
    """New teams are listed in the statistics"""
    config = write_json(tmp_path / "teams.json", {"root_teams": [{"name": "A"}]})
    output = tmp_path / "members.json"
    generate_membership_file(str(config), str(output))

    write_json(config, {"root_teams": [{"name": "A", "subteams": [{"name": "X"}]}, {"name": "B"}]})
    stats = generate_membership_file(str(config), str(output))

    assert stats.added_teams == ["B", "X (parent: A)"]


def test_generate_missing_config(tmp_path):
    """A missing structure file is a configuration error"""
    with pytest.raises(ConfigNotFoundError):
        generate_membership_file(str(tmp_path / "teams.json"), str(tmp_path / "out.json"))
    assert not (tmp_path / "out.json").exists()


def test_failed_generation_keeps_previous_file(tmp_path, write_json):
    """Invalid structures do not touch the existing members file"""
    config = tmp_path / "teams.json"
    config.write_text('{"root_teams": [', encoding="UTF-8")
    output = tmp_path / "members.json"
    output.write_text('{"root_teams": [{"name": "A", "members": ["alice"]}]}', encoding="UTF-8")
    before = output.read_bytes()

    with pytest.raises(MalformedInputError):
        generate_membership_file(str(config), str(output))
    assert output.read_bytes() == before

    write_json(config, {"root_teams": "A"})
    with pytest.raises(SchemaError):
        generate_membership_file(str(config), str(output))
    assert output.read_bytes() == before


def test_generate_write_error(tmp_path, write_json):
    """An unwritable output location is a write error"""
    config = write_json(tmp_path / "teams.json", {"root_teams": [{"name": "A"}]})
    with pytest.raises(WriteError):
        generate_membership_file(str(config), str(tmp_path / "missing" / "out.json"))


def test_read_membership_file(tmp_path, write_json):
    """Membership files are read from disk"""
    path = write_json(
        tmp_path / "members.json",
        {"subteams": [{"name": "X", "parent_team": "A", "members": ["alice", None, ""]}]},
    )
    membership = read_membership(str(path))
    assert membership.subteams[0].members == ["alice", None, ""]


def test_compute_changes_with_duplicate_removed_team():
    """Teams listed twice in the previous document are removed once"""
    previous = MembershipDoc(
        root_teams=[RootTeamMembers("Old", ["alice"]), RootTeamMembers("Old", ["bob"])],
        subteams=[
            SubteamMembers("X", "Old", ["carol"]),
            SubteamMembers("X", "Old", ["carol"]),
        ],
    )
    new = MembershipDoc(root_teams=[RootTeamMembers("New", ["dave"])])

    stats = compute_changes(new, previous)

    assert stats.removed_teams == ["Old", "X (parent: Old)"]
    assert stats.lost_members == {"Old": ["bob"], "X (parent: Old)": ["carol"]}
    assert stats.added_teams == ["New"]
    assert stats.team_members == {"New": ["dave"]}
