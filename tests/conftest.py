# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the tests"""

import json
from pathlib import Path

import pytest

from gh_team_members import _config


@pytest.fixture
def write_json():
    """Write a JSON document for a test"""

    def _write(path: Path, data: dict) -> Path:
        path.write_text(json.dumps(data), encoding="UTF-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Do not let file location variables of the caller leak into tests"""
    for variable in (
        _config.ENV_TEAMS_CONFIG_FILE,
        _config.ENV_TEAM_MEMBERS_FILE,
        _config.ENV_ORG_MEMBERS_FILE,
        _config.ENV_REPORT_FILE,
    ):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def structure_doc() -> dict:
    """A team structure with two root teams and three subteams"""
    return {
        "root_teams": [
            {
                "name": "Platform",
                "description": "Platform engineering",
                "privacy": "closed",
                "subteams": [
                    {"name": "Infra", "description": "Infrastructure", "privacy": "closed"},
                    {"name": "Docs", "privacy": "secret"},
                ],
            },
            {
                "name": "Product",
                "description": "Product development",
                "privacy": "closed",
                "subteams": [{"name": "Docs"}],
            },
        ]
    }
