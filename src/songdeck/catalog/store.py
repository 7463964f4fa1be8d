#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.


from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from ..core.models import CatalogSong, SongPage, SongRecord, SongStatistics
from ..core.statistics import DEFAULT_STATS_LIMIT, compute_statistics
from ..core.validation import normalize_record

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25
PAGE_SIZE_CHOICES = (10, 25, 50)

SORT_ORDERS: dict[str, str] = {
    "id_asc": "id ASC",
    "id_desc": "id DESC",
    "artist_asc": "artist COLLATE NOCASE ASC, id ASC",
    "artist_desc": "artist COLLATE NOCASE DESC, id ASC",
    "title_asc": "title COLLATE NOCASE ASC, id ASC",
    "title_desc": "title COLLATE NOCASE DESC, id ASC",
    "year_desc": "year IS NULL, year DESC, id ASC",
    "year_asc": "year IS NULL, year ASC, id ASC",
}

_SCHEMA = """
CREATE TABLE IF NOT EXISTS songs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artist TEXT NOT NULL,
    title TEXT NOT NULL,
    year INTEGER,
    youtube_url TEXT NOT NULL UNIQUE
)
"""
_COLUMNS = "id, artist, title, year, youtube_url"


class CatalogStore:
    """Song catalog kept in a local SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(_SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(str(self.path))) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def list_songs(
        self,
        *,
        page: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
        search: str | None = None,
        year: int | None = None,
        sort: str = "id_asc",
    ) -> SongPage:
        if page < 0:
            raise ValueError("page must not be negative")
        if page_size <= 0:
            raise ValueError("page size must be positive")
        order = SORT_ORDERS.get(sort)
        if order is None:
            raise ValueError(f"unknown sort order: {sort} (choose from {', '.join(SORT_ORDERS)})")

        clauses: list[str] = []
        params: list[object] = []
        term = (search or "").strip()
        if term:
            pattern = f"%{_escape_like(term)}%"
            clauses.append(
                "(artist LIKE ? ESCAPE '\\' OR title LIKE ? ESCAPE '\\'"
                " OR youtube_url LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])
        if year is not None:
            clauses.append("year = ?")
            params.append(year)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._connect() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM songs{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM songs{where} ORDER BY {order} LIMIT ? OFFSET ?",
                [*params, page_size, page * page_size],
            ).fetchall()
        return SongPage(
            songs=tuple(_song(row) for row in rows),
            total=int(total),
            page=page,
            page_size=page_size,
        )

    def get_song(self, song_id: int) -> CatalogSong:
        with self._connect() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM songs WHERE id = ?", (song_id,)).fetchone()
        if row is None:
            raise LookupError(f"song {song_id} not found")
        return _song(row)

    def create_song(self, record: SongRecord) -> CatalogSong:
        clean = _sanitize(record)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO songs (artist, title, year, youtube_url) VALUES (?, ?, ?, ?)",
                    (clean.artist, clean.title, clean.year, clean.link),
                )
                song_id = int(cursor.lastrowid or 0)
        except sqlite3.IntegrityError:
            raise ValueError(f"a song with link {clean.link} already exists") from None
        logger.debug("Created song %d", song_id)
        return CatalogSong(song_id, clean.artist, clean.title, clean.year, clean.link)

    def update_song(self, song_id: int, record: SongRecord) -> CatalogSong:
        clean = _sanitize(record)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE songs SET artist = ?, title = ?, year = ?, youtube_url = ? "
                    "WHERE id = ?",
                    (clean.artist, clean.title, clean.year, clean.link, song_id),
                )
        except sqlite3.IntegrityError:
            raise ValueError(f"a song with link {clean.link} already exists") from None
        if cursor.rowcount == 0:
            raise LookupError(f"song {song_id} not found")
        return CatalogSong(song_id, clean.artist, clean.title, clean.year, clean.link)

    def delete_song(self, song_id: int) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM songs WHERE id = ?", (song_id,))
        if cursor.rowcount == 0:
            raise LookupError(f"song {song_id} not found")

    def bulk_upsert(self, records: Iterable[SongRecord]) -> int:
        """Insert new songs and update existing ones, matched by link."""
        rows = [_sanitize(record) for record in records]
        if not rows:
            return 0
        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO songs (artist, title, year, youtube_url) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(youtube_url) DO UPDATE SET "
                "artist = excluded.artist, title = excluded.title, year = excluded.year",
                [(row.artist, row.title, row.year, row.link) for row in rows],
            )
        logger.info("Upserted %d songs into %s", len(rows), self.path)
        return len(rows)

    def fetch_all(self) -> list[CatalogSong]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM songs ORDER BY id ASC").fetchall()
        return [_song(row) for row in rows]

    def count(self) -> int:
        with self._connect() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM songs").fetchone()[0])

    def statistics(self, *, limit: int = DEFAULT_STATS_LIMIT) -> SongStatistics:
        return compute_statistics([song.record() for song in self.fetch_all()], limit=limit)


def _sanitize(record: SongRecord) -> SongRecord:
    return normalize_record(
        artist=record.artist,
        title=record.title,
        year=record.year,
        link=record.link,
    )


def _song(row: sqlite3.Row) -> CatalogSong:
    return CatalogSong(
        id=int(row["id"]),
        artist=row["artist"],
        title=row["title"],
        year=row["year"],
        link=row["youtube_url"],
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
