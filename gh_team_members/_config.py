# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Handling of file locations, reading and writing of the team documents"""

import json
import logging
import os
import tempfile
from typing import Any

import yaml
from jsonschema import FormatChecker, validate
from jsonschema.exceptions import ValidationError

from ._errors import (
    DocumentNotFoundError,
    MalformedInputError,
    ReadError,
    SchemaError,
    WriteError,
)

# Conventional file names, looked up in the working directory
TEAMS_CONFIG_FILE = "teams.tfvars.json"
TEAM_MEMBERS_FILE = "team_members.tfvars.json"
ORG_MEMBERS_FILE = "members.tfvars.json"
REPORT_FILE = "validation_report.json"

# Environment variables which may override the conventional file names
ENV_TEAMS_CONFIG_FILE = "TEAMS_CONFIG_FILE"
ENV_TEAM_MEMBERS_FILE = "TEAM_MEMBERS_FILE"
ENV_ORG_MEMBERS_FILE = "ORG_MEMBERS_FILE"
ENV_REPORT_FILE = "VALIDATION_REPORT_FILE"

# Schemas for document validation
_NAMED_OBJECT = {
    "type": "object",
    "properties": {"name": {"type": "string"}},
    "required": ["name"],
}
_MEMBER_LIST = {
    "oneOf": [
        {"type": "null"},
        {"type": "array", "items": {"oneOf": [{"type": "null"}, {"type": "string"}]}},
    ]
}
TEAM_STRUCTURE_SCHEMA = {
    "type": "object",
    "properties": {
        "root_teams": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": ["string", "null"]},
                    "privacy": {"type": ["string", "null"]},
                    "subteams": {
                        "oneOf": [
                            {"type": "null"},
                            {"type": "array", "items": _NAMED_OBJECT},
                        ]
                    },
                },
                "required": ["name"],
            },
        },
    },
    "required": ["root_teams"],
}
MEMBERSHIP_SCHEMA = {
    "type": "object",
    "properties": {
        "root_teams": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"name": {"type": "string"}, "members": _MEMBER_LIST},
                "required": ["name"],
            },
        },
        "subteams": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "parent_team": {"type": "string"},
                    "members": _MEMBER_LIST,
                },
                "required": ["name", "parent_team"],
            },
        },
    },
}
ROSTER_SCHEMA = {
    "type": "object",
    "properties": {
        "members": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["members"],
}


def resolve_path(
    path: str | None, env_variable: str, default: str, directory: str = "."
) -> str:
    """Get the location of a document. An explicitly given path wins, then the
    environment variable, then the conventional file name. Relative paths are
    taken relative to `directory`"""
    if path:
        logging.debug("Path for %s taken from argument: %s", env_variable, path)
    elif env_variable in os.environ and os.environ[env_variable]:
        path = os.environ[env_variable]
        logging.debug("Path for %s taken from environment: %s", env_variable, path)
    else:
        path = default

    return os.path.join(directory, path)


def parse_document(content: str, source: str) -> Any:
    """Parse the content of a document. JSON for *.json files, YAML otherwise"""
    try:
        if source.endswith(".json"):
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MalformedInputError(f"{source} is not a valid JSON/YAML document: {exc}") from exc

    # Empty documents are treated like empty objects
    if data is None:
        data = {}

    return data


def read_document(file: str, not_found_error: type[DocumentNotFoundError] = DocumentNotFoundError):
    """Return the parsed content of a JSON or YAML file"""
    logging.debug("Attempting to parse file %s", file)
    try:
        with open(file, encoding="UTF-8") as reader:
            content = reader.read()
    except FileNotFoundError:
        raise not_found_error(f"Required file '{file}' does not exist") from None
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"{file} is not a UTF-8 text file: {exc}") from exc
    except OSError as exc:
        raise ReadError(f"File {file} could not be read: {exc}") from exc

    return parse_document(content, source=file)


def validate_schema(source: str, data: Any, schema: dict) -> None:
    """Validate the document against a JSON schema"""
    try:
        validate(instance=data, schema=schema, format_checker=FormatChecker())
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise SchemaError(
            f"Validation of {source} failed at '{location}': {e.message}"
        ) from None
    logging.debug("Document %s validated successfully against schema", source)


def dump_document(data: dict) -> str:
    """Serialise a document the way it is persisted"""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_document(file: str, data: dict) -> None:
    """Write a document as JSON. The target is replaced in one step, so
    readers see either the old or the new content, never a partial one"""
    content = dump_document(data)
    directory = os.path.dirname(os.path.abspath(file))

    tmp_path = ""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="UTF-8",
            dir=directory,
            prefix=f".{os.path.basename(file)}.",
            suffix=".tmp",
            delete=False,
        ) as writer:
            tmp_path = writer.name
            writer.write(content)
            writer.flush()
            os.fsync(writer.fileno())
        # Temporary files are created private, keep the permissions of the target
        mode = os.stat(file).st_mode & 0o777 if os.path.exists(file) else 0o644
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, file)
    except OSError as exc:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise WriteError(f"File {file} could not be written: {exc}") from exc

    logging.debug("Wrote %s", file)
