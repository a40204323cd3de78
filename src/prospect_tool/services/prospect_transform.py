"""Turn parsed CSV rows into typed prospect records"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from email_validator import validate_email, EmailNotValidError
from pydantic import TypeAdapter

from src.prospect_tool.exceptions import MissingActorError
from src.prospect_tool.models.prospect import ProspectStatus, ProspectType
from src.prospect_tool.schemas.prospect import ProspectRecord
from src.prospect_tool.services.csv_parser import CSVRow
from src.prospect_tool.services.field_mapper import PROSPECT_FIELDS, TargetField

RECORD_ADAPTER: TypeAdapter[ProspectRecord] = TypeAdapter(ProspectRecord)


def split_tags(value: str) -> List[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def transform_row(
    row: CSVRow,
    mapping: Mapping[str, str],
    actor_id: int,
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> ProspectRecord:
    data: Dict[str, Any] = {
        "created_by": actor_id,
        "status": ProspectStatus.NEW.value,
    }
    known = {field.key for field in fields}

    for field_key, column in mapping.items():
        if field_key not in known or not column:
            continue
        value = row.get(column, "")
        if not value:
            continue
        if field_key == "tags":
            tags = split_tags(value)
            if tags:
                data["tags"] = tags
        else:
            data[field_key] = value

    data["prospect_type"] = ProspectType.COMPANY.value
    if data.get("contact_name") and not data.get("company_name"):
        data["prospect_type"] = ProspectType.PERSON.value
    return RECORD_ADAPTER.validate_python(data)


def transform_rows(
    rows: Sequence[CSVRow],
    mapping: Mapping[str, str],
    actor_id: Optional[int],
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> List[ProspectRecord]:
    """Row i of the input always becomes record i of the output."""
    if actor_id is None:
        raise MissingActorError("An acting user is required to import prospects")
    return [transform_row(row, mapping, actor_id, fields) for row in rows]


def record_warnings(record: ProspectRecord) -> List[str]:
    warnings = []
    if record.contact_email:
        try:
            validate_email(record.contact_email, check_deliverability=False)
        except EmailNotValidError as e:
            warnings.append(f"invalid email format: {str(e)}")
    if not record.company_name and not record.contact_name:
        warnings.append("neither company_name nor contact_name is set")
    return warnings
