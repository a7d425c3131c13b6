"""Creates directories and empty files from a structure diagram."""

from __future__ import annotations

import logging
from typing import Callable

from treesmith.core.codec import parse
from treesmith.core.fs_access import FilesystemAccessor
from treesmith.models.results import CreateResult, Outcome
from treesmith.utils import join_under

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (full_path, status)


def create_structure(
    fs: FilesystemAccessor,
    base_path: str,
    text: str,
    on_progress: ProgressCallback | None = None,
) -> CreateResult:
    """Materialize every parsed entry of *text* below *base_path*.

    Creation is best-effort: a failing item is counted and the rest are
    still attempted. Files that already exist are left untouched.
    """
    if not base_path or not text.strip():
        return CreateResult(outcome=Outcome.EMPTY, message="Structure text missing!")

    result = CreateResult(outcome=Outcome.OK)
    for entry in parse(text):
        full_path = join_under(base_path, entry.full_path)

        if entry.is_file and fs.path_kind(full_path) is not None:
            log.debug("Skipping existing path: %s", full_path)
            result.skipped += 1
            if on_progress:
                on_progress(full_path, "skipped")
            continue

        res = fs.create_file(full_path) if entry.is_file else fs.create_directory(full_path)
        if res.success:
            result.created += 1
            if on_progress:
                on_progress(full_path, "created")
        else:
            log.warning("Create failed: %s: %s", full_path, res.error)
            result.failed += 1
            result.errors.append(f"{full_path}: {res.error}")
            if on_progress:
                on_progress(full_path, "error")

    if result.created > 0 and result.failed == 0:
        result.message = f"Created {result.created} items successfully!"
    elif result.created > 0:
        result.message = f"Created {result.created}, failed {result.failed}"
    elif result.failed > 0:
        result.outcome = Outcome.FAILED
        result.message = "No items were created!"
    else:
        result.message = "Nothing to create, all files already exist"

    log.info("%s (skipped %d)", result.message, result.skipped)
    return result
