"""Column-to-field mapping for prospect CSV imports"""
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from src.prospect_tool.exceptions import MappingError
from src.prospect_tool.schemas.csv_import import ColumnMapping


@dataclass(frozen=True)
class TargetField:
    key: str
    label: str
    required: bool = False


PROSPECT_FIELDS: Tuple[TargetField, ...] = (
    TargetField("company_name", "Company Name"),
    TargetField("company_domain", "Company Domain"),
    TargetField("company_industry", "Industry"),
    TargetField("company_size", "Company Size"),
    TargetField("company_location", "Company Location"),
    TargetField("company_linkedin", "Company LinkedIn"),
    TargetField("contact_name", "Contact Name"),
    TargetField("contact_email", "Contact Email"),
    TargetField("contact_phone", "Contact Phone"),
    TargetField("contact_title", "Contact Title"),
    TargetField("contact_linkedin", "Contact LinkedIn"),
    TargetField("notes", "Notes"),
    TargetField("tags", "Tags (comma-separated)"),
    TargetField("source", "Source"),
)

# Applied in order after the exact-match pass for the same header.
HEADER_SYNONYMS: Tuple[Tuple[str, str], ...] = (
    ("company", "company_name"),
    ("email", "contact_email"),
    ("name", "contact_name"),
    ("phone", "contact_phone"),
    ("title", "contact_title"),
    ("linkedin", "contact_linkedin"),
    ("domain", "company_domain"),
    ("website", "company_domain"),
    ("industry", "company_industry"),
    ("size", "company_size"),
    ("location", "company_location"),
)

SKIP_VALUES = {"", "_skip_"}

EXACT_CONFIDENCE = 1.0
SYNONYM_CONFIDENCE = 0.8


def normalize_header(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower())


def match_header(
    header: str,
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
    synonyms: Sequence[Tuple[str, str]] = HEADER_SYNONYMS,
) -> List[Tuple[str, float]]:
    """Every field a header matches, in rule order, with its confidence."""
    normalized = normalize_header(header)
    if not normalized:
        return []

    known = {field.key for field in fields}
    matches = []
    for field in fields:
        if normalized in (normalize_header(field.key), normalize_header(field.label)):
            matches.append((field.key, EXACT_CONFIDENCE))
    for synonym, field_key in synonyms:
        if normalized == synonym and field_key in known:
            matches.append((field_key, SYNONYM_CONFIDENCE))
    return matches


def auto_map_columns(
    headers: Sequence[str],
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
    synonyms: Sequence[Tuple[str, str]] = HEADER_SYNONYMS,
) -> Dict[str, str]:
    """
    Suggest a field -> header mapping.
    Headers are visited in CSV order and every matching rule assigns its
    field, so when two headers match the same field the later column wins.
    """
    mapping: Dict[str, str] = {}
    for header in headers:
        for field_key, _ in match_header(header, fields, synonyms):
            mapping[field_key] = header
    return mapping


def describe_mapping(
    headers: Sequence[str],
    mapping: Mapping[str, str],
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> List[ColumnMapping]:
    columns = []
    for header in headers:
        targets = [field_key for field_key, source in mapping.items() if source == header]
        if not targets:
            columns.append(ColumnMapping(original=header, mapped_to=None, confidence=0.0))
            continue
        suggested = dict(match_header(header, fields))
        for field_key in targets:
            columns.append(ColumnMapping(
                original=header,
                mapped_to=field_key,
                confidence=suggested.get(field_key, 0.0)
            ))
    return columns


def unmapped_columns(headers: Sequence[str], mapping: Mapping[str, str]) -> List[str]:
    used = set(mapping.values())
    return [header for header in headers if header not in used]


def mapped_fields_count(mapping: Mapping[str, Optional[str]]) -> int:
    return len([source for source in mapping.values() if source])


def validate_mapping(
    mapping: Mapping[str, str],
    headers: Sequence[str],
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> None:
    known = {field.key for field in fields}
    header_set = set(headers)
    errors = []
    for field_key, source in mapping.items():
        if field_key not in known:
            errors.append(f"unknown field: '{field_key}'")
        elif source not in header_set:
            errors.append(f"column '{source}' for {field_key} is not in the CSV headers")
    if errors:
        raise MappingError("; ".join(errors))


def apply_mapping_update(
    mapping: Mapping[str, str],
    updates: Mapping[str, Optional[str]],
    headers: Sequence[str],
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> Dict[str, str]:
    """Return a new mapping with user overrides applied; skip values unmap the field."""
    known = {field.key for field in fields}
    unknown = [field_key for field_key in updates if field_key not in known]
    if unknown:
        raise MappingError(f"unknown field(s): {', '.join(sorted(unknown))}")

    updated = dict(mapping)
    for field_key, source in updates.items():
        if source is None or source in SKIP_VALUES:
            updated.pop(field_key, None)
        else:
            updated[field_key] = source
    validate_mapping(updated, headers, fields)
    return updated
