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

from dataclasses import dataclass


@dataclass(frozen=True)
class SongRecord:
    artist: str
    title: str
    year: int | None
    link: str

    def has_link(self) -> bool:
        return bool(self.link.strip())


@dataclass(frozen=True)
class CatalogSong:
    id: int
    artist: str
    title: str
    year: int | None
    link: str

    def record(self) -> SongRecord:
        return SongRecord(artist=self.artist, title=self.title, year=self.year, link=self.link)


@dataclass(frozen=True)
class SongPage:
    songs: tuple[CatalogSong, ...]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        if self.total <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size


@dataclass(frozen=True)
class StatEntry:
    label: str
    count: int


@dataclass(frozen=True)
class SongStatistics:
    total_songs: int
    missing_year_count: int
    years_most_common: tuple[StatEntry, ...]
    years_least_common: tuple[StatEntry, ...]
    decades_least_common: tuple[StatEntry, ...]
    artists_most_common: tuple[StatEntry, ...]
