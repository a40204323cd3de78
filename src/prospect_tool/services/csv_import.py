"""Prospect CSV import workflow: upload, mapping, duplicate check, confirm"""
import csv
import io
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set

from sqlalchemy.orm import Session

from src.prospect_tool.config import get_settings
from src.prospect_tool.exceptions import (
    ImportSessionNotFound,
    ImportStateError,
    MappingError,
    UploadRejected,
)
from src.prospect_tool.models.user import User
from src.prospect_tool.schemas.csv_import import (
    DuplicateCheckResult,
    ImportProgress,
    ImportResult,
    MappingResponse,
    PreviewRecord,
    TargetFieldSchema,
    UploadResult,
)
from src.prospect_tool.services.audit import log_prospect_import
from src.prospect_tool.services.batch_import import CancellationToken, import_prospects
from src.prospect_tool.services.csv_parser import CSVRow, decode_csv_content, parse_csv, validate_upload
from src.prospect_tool.services.duplicate_check import check_duplicates
from src.prospect_tool.services.field_mapper import (
    PROSPECT_FIELDS,
    TargetField,
    apply_mapping_update,
    auto_map_columns,
    describe_mapping,
    mapped_fields_count,
    unmapped_columns,
)
from src.prospect_tool.services.prospect_store import ProspectStore
from src.prospect_tool.services.prospect_transform import record_warnings, transform_rows

logger = logging.getLogger(__name__)

STAGE_MAPPING = "mapping"
STAGE_CHECKING = "checking"
STAGE_CHECKED = "checked"
STAGE_IMPORTING = "importing"
STAGE_COMPLETE = "complete"


@dataclass
class ImportSession:
    session_id: str
    filename: str
    actor_id: int
    headers: List[str]
    rows: List[CSVRow]
    mapping: Dict[str, str]
    fields: Sequence[TargetField] = PROSPECT_FIELDS
    stage: str = STAGE_MAPPING
    duplicates: Optional[Set[int]] = None
    progress: int = 0
    result: Optional[ImportResult] = None
    cancel_token: CancellationToken = field(default_factory=CancellationToken)
    created_at: datetime = field(default_factory=datetime.now)


IMPORT_SESSIONS: Dict[str, ImportSession] = {}


def purge_expired_sessions(now: Optional[datetime] = None) -> int:
    ttl = timedelta(minutes=get_settings().IMPORT_SESSION_TTL_MINUTES)
    now = now or datetime.now()
    expired = [
        session_id for session_id, session in IMPORT_SESSIONS.items()
        if session.stage != STAGE_IMPORTING and now - session.created_at > ttl
    ]
    for session_id in expired:
        del IMPORT_SESSIONS[session_id]
    return len(expired)


def get_import_session(session_id: str) -> ImportSession:
    purge_expired_sessions()
    session = IMPORT_SESSIONS.get(session_id)
    if session is None:
        raise ImportSessionNotFound("Invalid or expired import session. Please upload the file again.")
    return session


def _field_schemas(fields: Sequence[TargetField]) -> List[TargetFieldSchema]:
    return [TargetFieldSchema(key=f.key, label=f.label, required=f.required) for f in fields]


def create_import_session(
    content: bytes,
    filename: str,
    actor_id: int,
    fields: Sequence[TargetField] = PROSPECT_FIELDS,
) -> UploadResult:
    settings = get_settings()
    validate_upload(filename, len(content), settings.max_upload_bytes)

    parsed = parse_csv(decode_csv_content(content))
    if not parsed.rows:
        raise UploadRejected("Empty file: the CSV file contains no data rows")

    mapping = auto_map_columns(parsed.headers, fields)
    session = ImportSession(
        session_id=str(uuid.uuid4()),
        filename=filename,
        actor_id=actor_id,
        headers=parsed.headers,
        rows=parsed.rows,
        mapping=mapping,
        fields=fields,
    )
    purge_expired_sessions()
    IMPORT_SESSIONS[session.session_id] = session
    logger.info(
        f"Import session {session.session_id} created: file={filename}, rows={len(parsed.rows)}, "
        f"auto-mapped={mapped_fields_count(mapping)}"
    )

    return UploadResult(
        session_id=session.session_id,
        filename=filename,
        total_rows=len(parsed.rows),
        headers=parsed.headers,
        fields=_field_schemas(fields),
        mapping=mapping,
        columns=describe_mapping(parsed.headers, mapping, fields),
        unmapped_columns=unmapped_columns(parsed.headers, mapping),
        mapped_fields_count=mapped_fields_count(mapping),
    )


def _mapping_response(session: ImportSession) -> MappingResponse:
    return MappingResponse(
        session_id=session.session_id,
        mapping=session.mapping,
        columns=describe_mapping(session.headers, session.mapping, session.fields),
        mapped_fields_count=mapped_fields_count(session.mapping),
    )


def update_session_mapping(session_id: str, updates: Mapping[str, Optional[str]]) -> MappingResponse:
    session = get_import_session(session_id)
    if session.stage not in (STAGE_MAPPING, STAGE_CHECKED):
        raise ImportStateError(f"Mapping cannot be changed while the import is {session.stage}")

    session.mapping = apply_mapping_update(session.mapping, updates, session.headers, session.fields)
    # A new mapping changes the records, so any earlier check no longer applies.
    session.stage = STAGE_MAPPING
    session.duplicates = None
    return _mapping_response(session)


async def run_duplicate_check(
    session_id: str,
    store: ProspectStore,
    preview_limit: Optional[int] = None,
) -> DuplicateCheckResult:
    session = get_import_session(session_id)
    if session.stage not in (STAGE_MAPPING, STAGE_CHECKED):
        raise ImportStateError(f"Duplicate check is not available while the import is {session.stage}")
    if mapped_fields_count(session.mapping) == 0:
        raise MappingError("Map at least one column before importing")

    if preview_limit is None:
        preview_limit = get_settings().PREVIEW_LIMIT

    records = transform_rows(session.rows, session.mapping, session.actor_id, session.fields)
    session.stage = STAGE_CHECKING
    try:
        duplicates = await check_duplicates(records, store)
    except Exception:
        session.stage = STAGE_MAPPING
        raise

    session.duplicates = duplicates
    session.stage = STAGE_CHECKED

    preview = [
        PreviewRecord(
            index=index,
            record=record.to_row(),
            is_duplicate=index in duplicates,
            warnings=record_warnings(record),
        )
        for index, record in enumerate(records[:preview_limit])
    ]

    return DuplicateCheckResult(
        session_id=session_id,
        total_rows=len(records),
        duplicate_count=len(duplicates),
        duplicate_indices=sorted(duplicates),
        will_import_if_skipped=len(records) - len(duplicates),
        preview=preview,
    )


async def execute_import(
    db: Session,
    session_id: str,
    actor: User,
    store: ProspectStore,
    skip_duplicates: bool = True,
    batch_size: Optional[int] = None,
    on_data_changed: Optional[Callable[[], None]] = None,
) -> ImportResult:
    session = get_import_session(session_id)
    if session.actor_id != actor.id:
        raise ImportStateError("This import session belongs to another user")
    if session.stage != STAGE_CHECKED or session.duplicates is None:
        raise ImportStateError("Run the duplicate check before importing")
    if mapped_fields_count(session.mapping) == 0:
        raise MappingError("Map at least one column before importing")

    if batch_size is None:
        batch_size = get_settings().IMPORT_BATCH_SIZE

    def update_progress(percent: int) -> None:
        session.progress = percent

    records = transform_rows(session.rows, session.mapping, actor.id, session.fields)
    session.stage = STAGE_IMPORTING
    session.progress = 0
    try:
        result = await import_prospects(
            records,
            session.duplicates,
            skip_duplicates,
            store,
            batch_size=batch_size,
            on_progress=update_progress,
            cancel_token=session.cancel_token,
            on_data_changed=on_data_changed,
        )
    finally:
        session.stage = STAGE_COMPLETE

    session.result = result
    if result.all_failed:
        logger.error(f"Import session {session_id}: every batch failed ({result.failed} records)")

    log_prospect_import(db, actor, session_id, session.filename, result)
    return result


def cancel_import(session_id: str) -> ImportProgress:
    """Stop a running import after its current batch, or discard a session not yet imported."""
    session = get_import_session(session_id)
    if session.stage == STAGE_COMPLETE:
        raise ImportStateError("Import has already completed")

    if session.stage == STAGE_IMPORTING:
        session.cancel_token.cancel()
    else:
        del IMPORT_SESSIONS[session_id]
        logger.info(f"Import session {session_id} discarded at stage {session.stage}")
        return ImportProgress(session_id=session_id, stage="discarded", progress=0)
    return get_import_progress(session_id)


def get_import_progress(session_id: str) -> ImportProgress:
    session = get_import_session(session_id)
    return ImportProgress(
        session_id=session_id,
        stage=session.stage,
        progress=session.progress,
        result=session.result,
    )


def build_template_csv(fields: Sequence[TargetField] = PROSPECT_FIELDS) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([f.label for f in fields])
    samples = [
        {
            "company_name": "Acme Manufacturing",
            "company_domain": "acme.com",
            "company_industry": "Manufacturing",
            "company_size": "201-500",
            "company_location": "Houston, TX",
            "contact_name": "Dana Reyes",
            "contact_email": "dana.reyes@acme.com",
            "contact_title": "VP Operations",
            "tags": "manufacturing, houston",
            "source": "conference",
        },
        {
            "contact_name": "Sam Patel",
            "contact_email": "sam.patel@example.com",
            "contact_phone": "+1 713 555 0100",
            "contact_title": "Controller",
            "notes": "Referred by a placed candidate",
            "tags": "finance",
            "source": "referral",
        },
    ]
    for sample in samples:
        writer.writerow([sample.get(f.key, "") for f in fields])

    # BOM so spreadsheet apps pick up UTF-8
    return output.getvalue().encode("utf-8-sig")
