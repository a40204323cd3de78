"""Duplicate detection against already-persisted prospects"""
import logging
from typing import List, Sequence, Set, Tuple

from src.prospect_tool.exceptions import DuplicateCheckError
from src.prospect_tool.schemas.prospect import ProspectRecord
from src.prospect_tool.services.prospect_store import ProspectStore

logger = logging.getLogger(__name__)


def _lower(value) -> str:
    return value.lower() if value else ""


def collect_lookup_keys(records: Sequence[ProspectRecord]) -> Tuple[List[str], List[str]]:
    domains = []
    emails = []
    for record in records:
        if record.company_domain:
            domains.append(record.company_domain.lower())
        if record.contact_email:
            emails.append(record.contact_email.lower())
    return domains, emails


async def check_duplicates(records: Sequence[ProspectRecord], store: ProspectStore) -> Set[int]:
    """
    Indices of records whose domain or email already exists in the store.
    One lookup covers the whole upload; the answer is a snapshot and is not
    re-validated before insert.
    """
    domains, emails = collect_lookup_keys(records)
    if not domains and not emails:
        return set()
    
    try:
        existing = await store.find_existing(domains, emails)
    except Exception as e:
        logger.error(f"Duplicate lookup failed for {len(records)} records: {e}")
        raise DuplicateCheckError() from e
    
    existing_domains = {_lower(p.company_domain) for p in existing if p.company_domain}
    existing_emails = {_lower(p.contact_email) for p in existing if p.contact_email}
    
    duplicates = set()
    for index, record in enumerate(records):
        domain = _lower(record.company_domain)
        email = _lower(record.contact_email)
        if (domain and domain in existing_domains) or (email and email in existing_emails):
            duplicates.add(index)
    
    logger.info(f"Duplicate check: {len(duplicates)} of {len(records)} records already exist")
    return duplicates
