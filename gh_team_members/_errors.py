# SPDX-FileCopyrightText: 2025 DB Systel GmbH
#
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised while reading, generating and validating team documents"""


class TeamMembersError(Exception):
    """Base class for all errors of this tool"""


class InvalidStructureError(TeamMembersError):
    """A document could be read but its content is not what we expect"""


class MalformedInputError(InvalidStructureError):
    """A document is not parseable as JSON or YAML"""


class SchemaError(InvalidStructureError):
    """A required key is missing or has the wrong shape"""


class DocumentNotFoundError(TeamMembersError, FileNotFoundError):
    """An input document does not exist"""


class ConfigNotFoundError(DocumentNotFoundError):
    """The team structure configuration does not exist"""


class WriteError(TeamMembersError):
    """An output document could not be persisted"""


class ReadError(TeamMembersError):
    """An input document exists but could not be read"""
