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

import concurrent.futures
import logging
import os
from collections.abc import Callable, Sequence

from ..core.models import SongRecord
from .types import CodeGenerationFailed, CodeImage, CodeOutcome, NoCodeInput

logger = logging.getLogger(__name__)

RENDER_JOBS_ENV = "SONGDECK_RENDER_JOBS"
_DEFAULT_WORKERS_CAP = 8
_MIN_TASKS_PER_WORKER = 4

CodeGenerator = Callable[[str], bytes]


def resolve_code_outcome(record: SongRecord, generator: CodeGenerator) -> CodeOutcome:
    """Generate the code image for one record.

    A blank link never reaches the generator. Generator errors are contained
    here so one bad link cannot abort the deck.
    """
    if not record.has_link():
        return NoCodeInput()
    link = record.link.strip()
    try:
        data = generator(link)
    except Exception as exc:
        reason = str(exc) or type(exc).__name__
        logger.warning("QR generation failed for %r (%s): %s", record.title, link, reason)
        return CodeGenerationFailed(reason=reason)
    return CodeImage(data=data)


def resolve_code_outcomes(
    records: Sequence[SongRecord],
    generator: CodeGenerator,
    *,
    workers: int | str | None = None,
) -> list[CodeOutcome]:
    """Resolve outcomes for every record, in input order."""
    if not records:
        return []

    def worker(record: SongRecord) -> CodeOutcome:
        return resolve_code_outcome(record, generator)

    count = resolve_workers(len(records), requested=workers)
    if count <= 1:
        return [worker(record) for record in records]

    logger.debug("Generating %d QR codes with %d workers", len(records), count)
    with concurrent.futures.ThreadPoolExecutor(max_workers=count) as executor:
        return list(executor.map(worker, records))


def resolve_workers(task_count: int, *, requested: int | str | None = None) -> int:
    explicit = False
    wanted: int | None = None

    raw = requested
    if raw is None:
        raw = os.environ.get(RENDER_JOBS_ENV, "")
    text = str(raw).strip().lower()
    if text and text != "auto":
        try:
            parsed = int(text)
        except ValueError:
            raise ValueError(f"{RENDER_JOBS_ENV} must be a positive integer or 'auto'") from None
        if parsed <= 0:
            raise ValueError(f"{RENDER_JOBS_ENV} must be a positive integer or 'auto'")
        wanted = parsed
        explicit = True

    cpu = os.cpu_count() or 1
    if wanted is None:
        wanted = min(cpu, _DEFAULT_WORKERS_CAP)

    workers = max(1, min(wanted, cpu, task_count))
    if not explicit:
        workers = min(workers, max(1, task_count // _MIN_TASKS_PER_WORKER))
    return max(1, workers)
