"""SQLite-backed link repository.

Persists users, collections, tags and links to a local SQLite database
(``DATABASE_PATH``, default ``data/links.db``).  Uses ``aiosqlite`` for
async I/O.  Besides the :class:`ILinkRepository` contract it exposes the
create/delete helpers used by the CLI and the test-suite to seed records.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import (
    AiTaggingMethod,
    Link,
    LinkPatch,
    LinkType,
    Tag,
    User,
)
from link_archiver.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/links.db")

_CREATE_USERS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS users (
    id                          INTEGER PRIMARY KEY AUTOINCREMENT,
    archive_as_screenshot       INTEGER NOT NULL DEFAULT 1,
    archive_as_monolith         INTEGER NOT NULL DEFAULT 1,
    archive_as_pdf              INTEGER NOT NULL DEFAULT 1,
    archive_as_readable         INTEGER NOT NULL DEFAULT 1,
    archive_as_wayback_machine  INTEGER NOT NULL DEFAULT 0,
    ai_tagging_method           TEXT    NOT NULL DEFAULT 'DISABLED',
    ai_predefined_tags          TEXT    NOT NULL DEFAULT '[]'
);
"""

_CREATE_COLLECTIONS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS collections (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    name      TEXT    NOT NULL,
    owner_id  INTEGER NOT NULL REFERENCES users(id)
);
"""

_CREATE_TAGS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS tags (
    id                          INTEGER PRIMARY KEY AUTOINCREMENT,
    name                        TEXT    NOT NULL,
    owner_id                    INTEGER NOT NULL REFERENCES users(id),
    archive_as_screenshot       INTEGER,
    archive_as_monolith         INTEGER,
    archive_as_pdf              INTEGER,
    archive_as_readable         INTEGER,
    archive_as_wayback_machine  INTEGER,
    ai_tag                      INTEGER,
    UNIQUE (name, owner_id)
);
"""

_CREATE_LINKS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS links (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    name            TEXT    NOT NULL DEFAULT '',
    url             TEXT,
    description     TEXT    NOT NULL DEFAULT '',
    type            TEXT    NOT NULL DEFAULT 'url',
    collection_id   INTEGER NOT NULL REFERENCES collections(id),
    readable        TEXT,
    image           TEXT,
    monolith        TEXT,
    pdf             TEXT,
    preview         TEXT,
    text_content    TEXT,
    ai_tagged       INTEGER NOT NULL DEFAULT 0,
    last_preserved  TEXT,
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_LINK_TAGS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS link_tags (
    link_id  INTEGER NOT NULL REFERENCES links(id) ON DELETE CASCADE,
    tag_id   INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
    PRIMARY KEY (link_id, tag_id)
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_links_collection ON links(collection_id);",
    "CREATE INDEX IF NOT EXISTS idx_tags_owner ON tags(owner_id);",
]

_SELECT_LINK_SQL = """\
SELECT l.*, c.owner_id
FROM links l
JOIN collections c ON l.collection_id = c.id
WHERE l.id = ?;
"""

_SELECT_USER_SQL = "SELECT * FROM users WHERE id = ?;"

_SELECT_LINK_TAGS_SQL = """\
SELECT t.*
FROM tags t
JOIN link_tags lt ON lt.tag_id = t.id
WHERE lt.link_id = ?
ORDER BY t.id;
"""

_SELECT_TAG_NAMES_SQL = "SELECT name FROM tags WHERE owner_id = ? ORDER BY name;"

_INSERT_TAG_IF_MISSING_SQL = "INSERT OR IGNORE INTO tags (name, owner_id) VALUES (?, ?);"

_CONNECT_TAG_SQL = """\
INSERT OR IGNORE INTO link_tags (link_id, tag_id)
SELECT ?, id FROM tags WHERE name = ? AND owner_id = ?;
"""

# Columns a LinkPatch may write.  Keys come from the model, never from
# user input, but the allow-list keeps the dynamic UPDATE honest.
_PATCHABLE_COLUMNS = frozenset(LinkPatch.model_fields)

_TAG_OVERRIDE_COLUMNS = (
    "archive_as_screenshot",
    "archive_as_monolith",
    "archive_as_pdf",
    "archive_as_readable",
    "archive_as_wayback_machine",
    "ai_tag",
)


def _optional_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _to_column(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, LinkType):
        return value.value
    return value


class SQLiteLinkRepository(ILinkRepository):
    """SQLite-backed link persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_USERS_TABLE_SQL)
                await db.execute(_CREATE_COLLECTIONS_TABLE_SQL)
                await db.execute(_CREATE_TAGS_TABLE_SQL)
                await db.execute(_CREATE_LINKS_TABLE_SQL)
                await db.execute(_CREATE_LINK_TAGS_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Could not initialize {self._db_path}: {exc}",
                provider_name="sqlite",
            ) from exc
        logger.info("link_db_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # ILinkRepository implementation
    # ------------------------------------------------------------------

    async def get_link(self, link_id: int) -> Link | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row

                cursor = await db.execute(_SELECT_LINK_SQL, (link_id,))
                link_row = await cursor.fetchone()
                if link_row is None:
                    return None

                cursor = await db.execute(_SELECT_USER_SQL, (link_row["owner_id"],))
                user_row = await cursor.fetchone()

                cursor = await db.execute(_SELECT_LINK_TAGS_SQL, (link_id,))
                tag_rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not read link {link_id}: {exc}", provider_name="sqlite") from exc

        if user_row is None:
            raise StorageError(
                message=f"Link {link_id} belongs to a collection without an owner",
                provider_name="sqlite",
            )

        return Link(
            id=link_row["id"],
            collection_id=link_row["collection_id"],
            owner=self._row_to_user(user_row),
            url=link_row["url"],
            name=link_row["name"],
            description=link_row["description"],
            type=LinkType(link_row["type"]),
            readable=link_row["readable"],
            image=link_row["image"],
            monolith=link_row["monolith"],
            pdf=link_row["pdf"],
            preview=link_row["preview"],
            text_content=link_row["text_content"],
            ai_tagged=bool(link_row["ai_tagged"]),
            last_preserved=(
                datetime.fromisoformat(link_row["last_preserved"])
                if link_row["last_preserved"]
                else None
            ),
            tags=[self._row_to_tag(row) for row in tag_rows],
        )

    async def update_link(self, link_id: int, patch: LinkPatch) -> None:
        if patch.is_empty():
            return
        changes = patch.changes()

        columns = [column for column in changes if column in _PATCHABLE_COLUMNS]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        values = [_to_column(changes[column]) for column in columns]

        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(f"UPDATE links SET {assignments} WHERE id = ?;", (*values, link_id))  # noqa: S608
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not update link {link_id}: {exc}", provider_name="sqlite") from exc

        logger.debug("link_updated", link_id=link_id, fields=columns)

    async def list_tag_names(self, owner_id: int) -> list[str]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_TAG_NAMES_SQL, (owner_id,))
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Could not list tags of user {owner_id}: {exc}",
                provider_name="sqlite",
            ) from exc
        return [row[0] for row in rows]

    async def connect_tags(self, link_id: int, owner_id: int, names: list[str]) -> None:
        cleaned = [name.strip() for name in names if name and name.strip()]
        if not cleaned:
            return
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                for name in cleaned:
                    await db.execute(_INSERT_TAG_IF_MISSING_SQL, (name, owner_id))
                    await db.execute(_CONNECT_TAG_SQL, (link_id, name, owner_id))
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not tag link {link_id}: {exc}", provider_name="sqlite") from exc

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    async def create_user(
        self,
        archive_as_screenshot: bool = True,
        archive_as_monolith: bool = True,
        archive_as_pdf: bool = True,
        archive_as_readable: bool = True,
        archive_as_wayback_machine: bool = False,
        ai_tagging_method: AiTaggingMethod = AiTaggingMethod.DISABLED,
        ai_predefined_tags: list[str] | None = None,
    ) -> int:
        """Insert a user and return its id."""
        return await self._insert(
            "INSERT INTO users (archive_as_screenshot, archive_as_monolith, archive_as_pdf, "
            "archive_as_readable, archive_as_wayback_machine, ai_tagging_method, ai_predefined_tags) "
            "VALUES (?, ?, ?, ?, ?, ?, ?);",
            (
                int(archive_as_screenshot),
                int(archive_as_monolith),
                int(archive_as_pdf),
                int(archive_as_readable),
                int(archive_as_wayback_machine),
                ai_tagging_method.value,
                json.dumps(ai_predefined_tags or []),
            ),
            "user",
        )

    async def create_collection(self, owner_id: int, name: str = "Unorganized") -> int:
        """Insert a collection and return its id."""
        return await self._insert(
            "INSERT INTO collections (name, owner_id) VALUES (?, ?);",
            (name, owner_id),
            "collection",
        )

    async def create_tag(self, owner_id: int, name: str, **overrides: bool | None) -> int:
        """Insert a tag with optional archival overrides and return its id."""
        unknown = set(overrides) - set(_TAG_OVERRIDE_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown tag overrides: {sorted(unknown)}")

        values = [_to_column(overrides.get(column)) for column in _TAG_OVERRIDE_COLUMNS]
        return await self._insert(
            f"INSERT INTO tags (name, owner_id, {', '.join(_TAG_OVERRIDE_COLUMNS)}) "  # noqa: S608
            f"VALUES (?, ?, {', '.join('?' for _ in _TAG_OVERRIDE_COLUMNS)});",
            (name, owner_id, *values),
            "tag",
        )

    async def create_link(
        self,
        collection_id: int,
        url: str | None,
        name: str = "",
        description: str = "",
        tag_ids: list[int] | None = None,
    ) -> int:
        """Insert a link (optionally tagged) and return its id."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    "INSERT INTO links (collection_id, url, name, description) VALUES (?, ?, ?, ?);",
                    (collection_id, url, name, description),
                )
                link_id = cursor.lastrowid
                for tag_id in tag_ids or []:
                    await db.execute(
                        "INSERT OR IGNORE INTO link_tags (link_id, tag_id) VALUES (?, ?);",
                        (link_id, tag_id),
                    )
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not create link: {exc}", provider_name="sqlite") from exc
        return link_id

    async def delete_link(self, link_id: int) -> None:
        """Remove a link and its tag associations."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute("DELETE FROM link_tags WHERE link_id = ?;", (link_id,))
                await db.execute("DELETE FROM links WHERE id = ?;", (link_id,))
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not delete link {link_id}: {exc}", provider_name="sqlite") from exc

    async def _insert(self, sql: str, params: tuple, entity: str) -> int:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                row_id = cursor.lastrowid
        except aiosqlite.Error as exc:
            raise StorageError(message=f"Could not create {entity}: {exc}", provider_name="sqlite") from exc
        return row_id

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            archive_as_screenshot=bool(row["archive_as_screenshot"]),
            archive_as_monolith=bool(row["archive_as_monolith"]),
            archive_as_pdf=bool(row["archive_as_pdf"]),
            archive_as_readable=bool(row["archive_as_readable"]),
            archive_as_wayback_machine=bool(row["archive_as_wayback_machine"]),
            ai_tagging_method=AiTaggingMethod(row["ai_tagging_method"]),
            ai_predefined_tags=json.loads(row["ai_predefined_tags"] or "[]"),
        )

    @staticmethod
    def _row_to_tag(row: aiosqlite.Row) -> Tag:
        return Tag(
            id=row["id"],
            name=row["name"],
            **{column: _optional_bool(row[column]) for column in _TAG_OVERRIDE_COLUMNS},
        )
