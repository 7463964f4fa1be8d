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

from collections import Counter
from collections.abc import Iterable

from .models import SongRecord, SongStatistics, StatEntry

DEFAULT_STATS_LIMIT = 5


def compute_statistics(
    records: Iterable[SongRecord],
    *,
    limit: int = DEFAULT_STATS_LIMIT,
) -> SongStatistics:
    """Aggregate catalog statistics.

    Years and decades are keyed numerically; artists are grouped by their
    case-folded name and labelled with the first spelling encountered.
    """
    if limit <= 0:
        raise ValueError("limit must be a positive integer")

    total = 0
    missing_year = 0
    years: Counter[int] = Counter()
    decades: Counter[int] = Counter()
    artists: Counter[str] = Counter()
    artist_labels: dict[str, str] = {}

    for record in records:
        total += 1
        if record.year is None:
            missing_year += 1
        else:
            years[record.year] += 1
            decades[(record.year // 10) * 10] += 1
        name = record.artist.strip()
        if name:
            key = name.casefold()
            artist_labels.setdefault(key, name)
            artists[key] += 1

    year_items = [(str(year), count, year) for year, count in years.items()]
    decade_items = [(f"{decade}s", count, decade) for decade, count in decades.items()]
    artist_items = [(artist_labels[key], count, key) for key, count in artists.items()]

    return SongStatistics(
        total_songs=total,
        missing_year_count=missing_year,
        years_most_common=_most_common(year_items, limit),
        years_least_common=_least_common(year_items, limit),
        decades_least_common=_least_common(decade_items, limit),
        artists_most_common=_most_common(artist_items, limit),
    )


def _most_common(items: list[tuple[str, int, object]], limit: int) -> tuple[StatEntry, ...]:
    ordered = sorted(items, key=lambda item: (-item[1], item[2]))
    return tuple(StatEntry(label=label, count=count) for label, count, _key in ordered[:limit])


def _least_common(items: list[tuple[str, int, object]], limit: int) -> tuple[StatEntry, ...]:
    ordered = sorted(items, key=lambda item: (item[1], item[2]))
    return tuple(StatEntry(label=label, count=count) for label, count, _key in ordered[:limit])
