"""CSV import schemas for the upload / map / check / confirm workflow"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, computed_field


class TargetFieldSchema(BaseModel):
    key: str
    label: str
    required: bool = False


class ColumnMapping(BaseModel):
    original: str
    mapped_to: Optional[str] = None
    confidence: float = 0.0


class UploadResult(BaseModel):
    session_id: str
    filename: str
    total_rows: int
    headers: List[str]
    fields: List[TargetFieldSchema]
    mapping: Dict[str, str]
    columns: List[ColumnMapping]
    unmapped_columns: List[str]
    mapped_fields_count: int


class MappingUpdateRequest(BaseModel):
    mapping: Dict[str, Optional[str]]


class MappingResponse(BaseModel):
    session_id: str
    mapping: Dict[str, str]
    columns: List[ColumnMapping]
    mapped_fields_count: int


class PreviewRecord(BaseModel):
    index: int
    record: Dict[str, Any]
    is_duplicate: bool
    warnings: List[str]


class DuplicateCheckResult(BaseModel):
    session_id: str
    total_rows: int
    duplicate_count: int
    duplicate_indices: List[int]
    will_import_if_skipped: int
    preview: List[PreviewRecord]


class ImportConfirmRequest(BaseModel):
    skip_duplicates: bool = True


class ImportResult(BaseModel):
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[str] = []
    cancelled: bool = False
    
    @property
    def attempted(self) -> int:
        return self.success + self.failed
    
    @computed_field
    @property
    def all_failed(self) -> bool:
        return self.failed > 0 and self.success == 0


class ImportResultResponse(ImportResult):
    session_id: str


class ImportProgress(BaseModel):
    session_id: str
    stage: str
    progress: int
    result: Optional[ImportResult] = None
