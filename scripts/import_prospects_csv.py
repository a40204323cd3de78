#!/usr/bin/env python3
"""
Import prospects from a CSV file without going through the API.
Runs the same mapping, duplicate check and batch insert as the web flow.

Usage (from the project root):
  .venv/bin/python scripts/import_prospects_csv.py --file prospects.csv --user-email agent@example.com
  .venv/bin/python scripts/import_prospects_csv.py --file prospects.csv --user-email agent@example.com --dry-run
  .venv/bin/python scripts/import_prospects_csv.py --file prospects.csv --user-email agent@example.com --no-skip

DATABASE_URL must be set (or present in .env).
"""
import argparse
import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from src.prospect_tool.config import settings
from src.prospect_tool.database import SessionLocal
from src.prospect_tool.exceptions import ProspectImportError
from src.prospect_tool.models.user import User
from src.prospect_tool.services.csv_import import (
    create_import_session,
    execute_import,
    run_duplicate_check,
)
from src.prospect_tool.services.prospect_store import SqlProspectStore


async def run(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    store = SqlProspectStore(
        SessionLocal,
        timeout=settings.STORE_TIMEOUT_SECONDS,
        read_attempts=settings.STORE_READ_ATTEMPTS,
    )

    with SessionLocal() as db:
        email = args.user_email.strip().lower()
        user = db.execute(select(User).where(User.email == email, User.is_active == True)).scalar_one_or_none()
        if not user:
            print(f"Error: no active user with email '{email}'", file=sys.stderr)
            return 1

        try:
            upload = create_import_session(path.read_bytes(), path.name, user.id)
            print(f"Rows: {upload.total_rows}, mapped fields: {upload.mapped_fields_count}")
            for field_key, column in upload.mapping.items():
                print(f"  {field_key:<18} <- {column}")
            if upload.unmapped_columns:
                print(f"Unmapped columns: {', '.join(upload.unmapped_columns)}")

            check = await run_duplicate_check(upload.session_id, store)
            print(f"Duplicates: {check.duplicate_count}")

            if args.dry_run:
                print("Dry run: nothing imported")
                return 0

            result = await execute_import(
                db=db,
                session_id=upload.session_id,
                actor=user,
                store=store,
                skip_duplicates=not args.no_skip,
            )
        except ProspectImportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(f"Imported: {result.success}, skipped: {result.skipped}, failed: {result.failed}")
    for error in result.errors:
        print(f"  {error}")
    return 1 if result.all_failed else 0


def main():
    parser = argparse.ArgumentParser(description="Import prospects from a CSV file")
    parser.add_argument("--file", required=True, help="Path to the CSV file")
    parser.add_argument("--user-email", required=True, help="Email of the user who owns the imported prospects")
    parser.add_argument("--no-skip", action="store_true", help="Import rows even if they match an existing prospect")
    parser.add_argument("--dry-run", action="store_true", help="Map and check duplicates only")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
