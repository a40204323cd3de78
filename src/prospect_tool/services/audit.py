"""Audit trail for bulk prospect actions"""
import json
from typing import Optional
from sqlalchemy.orm import Session

from src.prospect_tool.models.audit_log import AuditLog
from src.prospect_tool.models.user import User
from src.prospect_tool.schemas.csv_import import ImportResult

PROSPECTS_IMPORTED = "PROSPECTS_IMPORTED"


def log_action(
    db: Session,
    actor: User,
    action: str,
    target_type: str,
    import_session_id: Optional[str] = None,
    meta: Optional[dict] = None
) -> AuditLog:
    entry = AuditLog(
        actor_user_id=actor.id,
        actor_role_snapshot=actor.role.value,
        action=action,
        target_type=target_type,
        import_session_id=import_session_id,
        meta_json=json.dumps(meta, ensure_ascii=False) if meta else None
    )
    db.add(entry)
    db.commit()
    return entry


def log_prospect_import(
    db: Session,
    actor: User,
    session_id: str,
    filename: str,
    result: ImportResult,
) -> AuditLog:
    return log_action(
        db=db,
        actor=actor,
        action=PROSPECTS_IMPORTED,
        target_type="prospect",
        import_session_id=session_id,
        meta={
            "filename": filename,
            "success": result.success,
            "failed": result.failed,
            "skipped": result.skipped,
            "cancelled": result.cancelled,
            "error_count": len(result.errors),
        }
    )
