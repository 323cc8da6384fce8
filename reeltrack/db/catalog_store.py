import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.future import select

from reeltrack.db.database import Database
from reeltrack.db.models import CatalogEntryRow
from reeltrack.schemas import CatalogEntry, MediaKind

logger = logging.getLogger(__name__)

# CatalogEntry fields stored as plain columns
_COLUMNS = (
    "title",
    "year",
    "overview",
    "image_url",
    "rating",
    "status",
    "first_air_date",
    "last_air_date",
    "next_air_date",
)
# list fields stored as JSON strings
_JSON_COLUMNS = {"top_cast": "top_cast_json", "networks": "networks_json"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_entry(row: CatalogEntryRow) -> CatalogEntry:
    return CatalogEntry(
        kind=MediaKind(row.kind),
        external_id=row.external_id,
        title=row.title,
        year=row.year,
        overview=row.overview or "",
        image_url=row.image_url,
        rating=row.rating,
        top_cast=json.loads(row.top_cast_json or "[]"),
        networks=json.loads(row.networks_json or "[]"),
        status=row.status,
        first_air_date=row.first_air_date,
        last_air_date=row.last_air_date,
        next_air_date=row.next_air_date,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _changes(entry: CatalogEntry) -> Dict[str, Any]:
    """Column values `entry` provides; missing (None) fields keep their stored value."""
    changes = {}
    for name in _COLUMNS:
        value = getattr(entry, name)
        if value is not None:
            changes[name] = value
    for name, column in _JSON_COLUMNS.items():
        values = getattr(entry, name)
        if name in entry.model_fields_set or values:
            changes[column] = json.dumps(list(values))
    return changes


class CatalogStore:
    """Global catalog of imported titles, one row per (kind, external_id)."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = _utcnow):
        self._db = db
        self._clock = clock

    async def upsert(self, entry: CatalogEntry) -> CatalogEntry:
        """Insert or refresh the entry; concurrent writers of one id end up last-write-wins."""
        now = self._clock()
        changes = _changes(entry)
        where = (
            CatalogEntryRow.kind == entry.kind.value,
            CatalogEntryRow.external_id == entry.external_id,
        )
        async with self._db.session("catalog upsert") as session:
            insert = self._db.conflict_insert
            if insert is not None:
                stmt = insert(CatalogEntryRow).values(
                    kind=entry.kind.value,
                    external_id=entry.external_id,
                    created_at=now,
                    updated_at=now,
                    **{"top_cast_json": "[]", "networks_json": "[]", **changes},
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["kind", "external_id"],
                    set_={**changes, "updated_at": now},
                )
                await session.execute(stmt)
            else:
                # generic fallback: check, then insert or update
                row = (await session.execute(select(CatalogEntryRow).where(*where))).scalar_one_or_none()
                if row is None:
                    row = CatalogEntryRow(
                        kind=entry.kind.value,
                        external_id=entry.external_id,
                        top_cast_json="[]",
                        networks_json="[]",
                        created_at=now,
                    )
                    session.add(row)
                for column, value in changes.items():
                    setattr(row, column, value)
                row.updated_at = now
                await session.flush()

            result = await session.execute(
                select(CatalogEntryRow).where(*where).execution_options(populate_existing=True)
            )
            stored = _to_entry(result.scalar_one())
        return stored

    async def get(self, kind: MediaKind, external_id: int) -> Optional[CatalogEntry]:
        async with self._db.session("catalog get") as session:
            result = await session.execute(
                select(CatalogEntryRow).where(
                    CatalogEntryRow.kind == kind.value,
                    CatalogEntryRow.external_id == external_id,
                )
            )
            row = result.scalar_one_or_none()
            return _to_entry(row) if row is not None else None

    async def delete(self, kind: MediaKind, external_id: int) -> None:
        async with self._db.session("catalog delete") as session:
            await session.execute(
                delete(CatalogEntryRow).where(
                    CatalogEntryRow.kind == kind.value,
                    CatalogEntryRow.external_id == external_id,
                )
            )

    async def list_all(self, kind: MediaKind) -> List[CatalogEntry]:
        """All entries of `kind`, most recently updated first."""
        async with self._db.session("catalog list") as session:
            result = await session.execute(
                select(CatalogEntryRow)
                .where(CatalogEntryRow.kind == kind.value)
                .order_by(CatalogEntryRow.updated_at.desc(), CatalogEntryRow.id.desc())
            )
            return [_to_entry(row) for row in result.scalars().all()]
