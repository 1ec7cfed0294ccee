# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from __future__ import annotations

import re
from typing import cast

from familygraph.errors import ValidationError

NAME_PATTERN = re.compile(r"[A-Z][a-z]* [A-Z][A-Z-]*")
NAME_FORMAT_HINT = "Name must follow the 'Firstname LASTNAME' format"

KNOWN_RELATION_TYPES = ("FAMILLE", "AMIS", "AMOUR")
RELATION_TYPE_PATTERN = re.compile(r"[A-Z][A-Z0-9_]*")

# Six ASCII digits in 100000..999999.
IDENTIFIER_REGEX = r"[1-9][0-9]{5}"
IDENTIFIER_PATTERN = re.compile(IDENTIFIER_REGEX)


def is_valid_name(name: object) -> bool:
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name.strip()) is not None


def validate_name(name: object) -> str:
    """Return the trimmed name or raise :class:`ValidationError`."""
    if name is None or (isinstance(name, str) and not name.strip()):
        raise ValidationError("Name is required")
    if not is_valid_name(name):
        raise ValidationError(NAME_FORMAT_HINT, {"name": name})
    return cast(str, name).strip()


def validate_relation_type(relation_type: object) -> str:
    if not isinstance(relation_type, str) or not RELATION_TYPE_PATTERN.fullmatch(relation_type):
        raise ValidationError(
            "Relation type must be upper case letters, digits or underscores",
            {"type": relation_type},
        )
    return relation_type


def is_valid_identifier(value: object) -> bool:
    """True for a six digit string such as ``"123456"``."""
    return isinstance(value, str) and IDENTIFIER_PATTERN.fullmatch(value) is not None


def normalize_origins(origins: object) -> list[str]:
    """Accept a list of tags, a single tag or nothing."""
    if origins is None:
        return []
    if isinstance(origins, str):
        return [origins] if origins.strip() else []
    if isinstance(origins, (list, tuple, set)):
        return list(dict.fromkeys(str(o) for o in origins if str(o).strip()))
    raise ValidationError("origins must be a list of strings", {"origins": origins})


def parse_coordinate(value: object, field: str) -> float:
    """Coordinates default to 0 when absent."""
    if value is None:
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", {field: value})
