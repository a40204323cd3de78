"""Sequential, partial-failure tolerant batch insert of prospect records"""
import logging
from typing import Callable, List, Optional, Sequence, Set

from src.prospect_tool.schemas.csv_import import ImportResult
from src.prospect_tool.schemas.prospect import ProspectRecord
from src.prospect_tool.services.prospect_store import ProspectStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
ALL_DUPLICATES_MESSAGE = "All rows are duplicates"


class CancellationToken:
    """Cooperative stop flag, checked by the importer between batches."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def select_working_set(
    records: Sequence[ProspectRecord],
    duplicates: Set[int],
    skip_duplicates: bool,
) -> List[ProspectRecord]:
    if not skip_duplicates:
        return list(records)
    return [record for index, record in enumerate(records) if index not in duplicates]


def chunked(records: Sequence[ProspectRecord], size: int) -> List[Sequence[ProspectRecord]]:
    return [records[i:i + size] for i in range(0, len(records), size)]


async def import_prospects(
    records: Sequence[ProspectRecord],
    duplicates: Set[int],
    skip_duplicates: bool,
    store: ProspectStore,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: Optional[Callable[[int], None]] = None,
    cancel_token: Optional[CancellationToken] = None,
    on_data_changed: Optional[Callable[[], None]] = None,
) -> ImportResult:
    """
    Insert the working set in batches of `batch_size`, one after another.
    A failed batch is counted and reported as "Batch n: <message>" and the
    run moves on; earlier successes are never rolled back.
    """
    working_set = select_working_set(records, duplicates, skip_duplicates)
    skipped = len(records) - len(working_set)
    
    if not working_set:
        return ImportResult(success=0, failed=0, skipped=skipped, errors=[ALL_DUPLICATES_MESSAGE])
    
    result = ImportResult(skipped=skipped)
    errors: List[str] = []
    processed = 0
    batches_attempted = 0
    
    for number, batch in enumerate(chunked(working_set, batch_size), start=1):
        if cancel_token is not None and cancel_token.cancelled:
            remaining = len(working_set) - processed
            errors.append(f"Import cancelled after batch {number - 1}: {remaining} records not imported")
            result.cancelled = True
            logger.info(f"Import cancelled before batch {number}, {remaining} records left")
            break
        
        batches_attempted += 1
        try:
            await store.insert_batch(batch)
        except Exception as e:
            result.failed += len(batch)
            errors.append(f"Batch {number}: {e}")
            logger.warning(f"Batch {number} ({len(batch)} records) failed: {e}")
        else:
            result.success += len(batch)
        
        processed += len(batch)
        if on_progress is not None:
            on_progress(round(processed / len(working_set) * 100))
    
    result.errors = errors
    logger.info(
        f"Import finished: success={result.success}, failed={result.failed}, "
        f"skipped={result.skipped}, cancelled={result.cancelled}"
    )
    
    if batches_attempted and on_data_changed is not None:
        on_data_changed()
    
    return result
