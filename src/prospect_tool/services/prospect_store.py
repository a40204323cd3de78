"""Prospect persistence used by duplicate checks and batch inserts"""
import asyncio
import logging
from typing import Any, Callable, List, NamedTuple, Optional, Protocol, Sequence

from sqlalchemy import select, or_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.prospect_tool.exceptions import StoreError
from src.prospect_tool.models.prospect import Prospect
from src.prospect_tool.schemas.prospect import ProspectRecord

logger = logging.getLogger(__name__)


class ExistingProspect(NamedTuple):
    company_domain: Optional[str]
    contact_email: Optional[str]


class ProspectStore(Protocol):
    async def find_existing(self, domains: Sequence[str], emails: Sequence[str]) -> List[ExistingProspect]:
        """Persisted prospects whose domain is in `domains` or whose email is in `emails`."""
        ...

    async def insert_batch(self, records: Sequence[ProspectRecord]) -> None:
        """Insert every record or raise; there is no per-row outcome."""
        ...


def _describe(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


async def call_blocking(
    func_: Callable[..., Any],
    *args: Any,
    operation: str,
    timeout: float,
    attempts: int = 1,
) -> Any:
    """Run a blocking DB call off the event loop with a timeout and bounded retries."""
    last_error = ""
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(asyncio.to_thread(func_, *args), timeout=timeout)
        except asyncio.TimeoutError:
            last_error = f"{operation} timed out after {timeout:g}s"
        except SQLAlchemyError as e:
            last_error = f"{operation} failed: {_describe(e)}"
        logger.warning(f"{last_error} (attempt {attempt}/{attempts})")
    raise StoreError(last_error)


class SqlProspectStore:
    """ProspectStore backed by the prospects table."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        timeout: float = 15.0,
        read_attempts: int = 2,
    ):
        self.session_factory = session_factory
        self.timeout = timeout
        self.read_attempts = read_attempts

    def _find_existing(self, domains: List[str], emails: List[str]) -> List[ExistingProspect]:
        conditions = []
        if domains:
            conditions.append(func.lower(Prospect.company_domain).in_(domains))
        if emails:
            conditions.append(func.lower(Prospect.contact_email).in_(emails))
        if not conditions:
            return []

        stmt = select(Prospect.company_domain, Prospect.contact_email).where(or_(*conditions))
        with self.session_factory() as db:
            return [ExistingProspect(domain, email) for domain, email in db.execute(stmt).all()]

    def _insert_rows(self, rows: List[dict]) -> None:
        with self.session_factory() as db:
            try:
                db.add_all([Prospect(**row) for row in rows])
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise

    async def find_existing(self, domains: Sequence[str], emails: Sequence[str]) -> List[ExistingProspect]:
        # Values travel as bound parameters of an expanding IN clause.
        return await call_blocking(
            self._find_existing,
            sorted(set(domains)),
            sorted(set(emails)),
            operation="duplicate lookup",
            timeout=self.timeout,
            attempts=self.read_attempts,
        )

    async def insert_batch(self, records: Sequence[ProspectRecord]) -> None:
        # Writes are not retried: a timed-out insert may still have committed.
        rows = [record.to_row() for record in records]
        await call_blocking(
            self._insert_rows,
            rows,
            operation="insert",
            timeout=self.timeout,
        )
