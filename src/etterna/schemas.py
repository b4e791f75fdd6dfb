from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

_SECONDS_LIST: dict[str, Any] = {"type": "array", "items": {"type": "number"}}

_SKILLSET_NAMES = ["stream", "jumpstream", "handstream", "stamina", "jackspeed", "chordjack", "technical"]

_SKILLSETS8: dict[str, Any] = {
    "type": "object",
    "required": ["overall", *_SKILLSET_NAMES],
    "properties": {name: {"type": "number"} for name in ["overall", *_SKILLSET_NAMES]},
    "additionalProperties": False,
}

LANES_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "etterna.lanes.schema.json",
    "title": "Per-lane note and hit seconds of one play",
    "type": "object",
    "required": ["lanes"],
    "properties": {
        "lanes": {
            "type": "array",
            "minItems": 1,
            "maxItems": 10,
            "items": {
                "type": "object",
                "required": ["note_seconds", "hit_seconds"],
                "properties": {
                    "note_seconds": _SECONDS_LIST,
                    "hit_seconds": _SECONDS_LIST,
                },
                "additionalProperties": False,
            },
        },
        "num_mine_hits": {"type": "integer", "minimum": 0, "default": 0},
        "num_hold_drops": {"type": "integer", "minimum": 0, "default": 0},
    },
    "additionalProperties": False,
}

SCORES_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "etterna.scores.schema.json",
    "title": "Chronological chart skillsets of a player's scores",
    "type": "object",
    "required": ["scores"],
    "properties": {
        "scores": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["group", "skillsets"],
                "properties": {
                    "group": {"type": "string", "minLength": 1},
                    "skillsets": {
                        "type": "array",
                        "minItems": 7,
                        "maxItems": 7,
                        "items": {"type": "number", "minimum": 0},
                    },
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}

RESCORE_REPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "etterna.rescore_report.schema.json",
    "title": "Rescore result",
    "type": "object",
    "required": ["version", "judge", "wife", "scoring_system", "wifescore", "counts"],
    "properties": {
        "version": {"type": "string"},
        "judge": {"type": "string", "minLength": 1},
        "wife": {"type": "string", "enum": ["wife2", "wife3"]},
        "scoring_system": {"type": "string", "enum": ["naive", "matching"]},
        "wifescore": {
            "type": "object",
            "required": ["proportion", "percent", "grade"],
            "properties": {
                "proportion": {"type": "number", "maximum": 1.0},
                "percent": {"type": "string"},
                "grade": {"type": "string", "enum": ["AAAAA", "AAAA", "AAA", "AA", "A", "B", "C", "D"]},
            },
            "additionalProperties": False,
        },
        "counts": {
            "type": "object",
            "required": ["lanes", "notes", "hits", "judged_notes", "mine_hits", "hold_drops"],
            "properties": {
                "lanes": {"type": "integer", "minimum": 1},
                "notes": {"type": "integer", "minimum": 0},
                "hits": {"type": "integer", "minimum": 0},
                "judged_notes": {"type": "integer", "minimum": 1},
                "mine_hits": {"type": "integer", "minimum": 0},
                "hold_drops": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

TIMELINE_REPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "etterna.timeline_report.schema.json",
    "title": "Player skill timeline",
    "type": "object",
    "required": ["version", "pre_070", "num_scores", "changes"],
    "properties": {
        "version": {"type": "string"},
        "pre_070": {"type": "boolean"},
        "num_scores": {"type": "integer", "minimum": 0},
        "changes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["group", "skillsets"],
                "properties": {
                    "group": {"type": "string"},
                    "skillsets": _SKILLSETS8,
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}

SCHEMAS = {
    "lanes": LANES_SCHEMA,
    "scores": SCORES_SCHEMA,
    "rescore_report": RESCORE_REPORT_SCHEMA,
    "timeline_report": TIMELINE_REPORT_SCHEMA,
}


def validate(schema_name: str, data: dict[str, Any]) -> list[str]:
    schema = SCHEMAS.get(schema_name)
    if schema is None:
        return [f"unknown schema: {schema_name}"]
    validator = Draft202012Validator(schema)
    errors: list[str] = []
    for err in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        path = "/".join(str(item) for item in err.path)
        errors.append(f"{path or '$'}: {err.message}")
    return errors
