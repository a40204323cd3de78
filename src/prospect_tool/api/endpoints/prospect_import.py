"""Prospect CSV import endpoints: upload, map, check duplicates, confirm"""
import json
import logging
from typing import List

from fastapi import APIRouter, UploadFile, File, HTTPException, Response

from src.prospect_tool.api.deps import AgentUser, DbSession, Store
from src.prospect_tool.config import settings
from src.prospect_tool.exceptions import (
    DuplicateCheckError,
    ImportSessionNotFound,
    ImportStateError,
    MappingError,
    UploadRejected,
)
from src.prospect_tool.schemas.csv_import import (
    DuplicateCheckResult,
    ImportConfirmRequest,
    ImportProgress,
    ImportResultResponse,
    MappingResponse,
    MappingUpdateRequest,
    TargetFieldSchema,
    UploadResult,
)
from src.prospect_tool.services.csv_import import (
    build_template_csv,
    cancel_import,
    create_import_session,
    execute_import,
    get_import_progress,
    run_duplicate_check,
    update_session_mapping,
)
from src.prospect_tool.services.field_mapper import PROSPECT_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prospects/import", tags=["Prospect Import"])


@router.get("/fields", response_model=List[TargetFieldSchema])
def list_fields():
    return [TargetFieldSchema(key=f.key, label=f.label, required=f.required) for f in PROSPECT_FIELDS]


@router.get("/template")
def download_template():
    """Sample CSV whose headers auto-map to every prospect field."""
    return Response(
        content=build_template_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="prospects_import_template.csv"'}
    )


@router.post("/upload", response_model=UploadResult)
async def upload_csv(current_user: AgentUser, file: UploadFile = File(...)):
    """
    Parse an uploaded CSV and open an import session.
    Returns the suggested column mapping for review.
    """
    # One byte past the limit is enough to reject an oversized file.
    content = await file.read(settings.max_upload_bytes + 1)
    try:
        return create_import_session(content, file.filename or "", current_user.id)
    except UploadRejected as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{session_id}/mapping", response_model=MappingResponse)
def update_mapping(session_id: str, request: MappingUpdateRequest, current_user: AgentUser):
    try:
        return update_session_mapping(session_id, request.mapping)
    except ImportSessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except MappingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/check", response_model=DuplicateCheckResult)
async def check_session_duplicates(session_id: str, current_user: AgentUser, store: Store):
    try:
        return await run_duplicate_check(session_id, store)
    except ImportSessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except MappingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateCheckError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{session_id}/confirm", response_model=ImportResultResponse)
async def confirm_import(
    session_id: str,
    request: ImportConfirmRequest,
    current_user: AgentUser,
    db: DbSession,
    store: Store,
    response: Response,
):
    """
    Insert the mapped records in batches.
    Partial failures are reported in the body; the HX-Trigger header tells
    the dashboard to refresh its prospect listing.
    """
    def notify_prospects_changed() -> None:
        response.headers["HX-Trigger"] = json.dumps({"prospectsChanged": {"session_id": session_id}})

    try:
        result = await execute_import(
            db=db,
            session_id=session_id,
            actor=current_user,
            store=store,
            skip_duplicates=request.skip_duplicates,
            on_data_changed=notify_prospects_changed,
        )
    except ImportSessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except MappingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImportResultResponse(session_id=session_id, **result.model_dump(exclude={"all_failed"}))


@router.get("/{session_id}/progress", response_model=ImportProgress)
def import_progress(session_id: str, current_user: AgentUser):
    try:
        return get_import_progress(session_id)
    except ImportSessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/cancel", response_model=ImportProgress)
def cancel_session(session_id: str, current_user: AgentUser):
    try:
        return cancel_import(session_id)
    except ImportSessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
