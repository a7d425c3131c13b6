"""Splits a combined text blob into files and writes them to disk."""

from __future__ import annotations

import logging
import os
import re
from typing import Callable, Iterable, Sequence

from treesmith.core.fs_access import FilesystemAccessor
from treesmith.models.blocks import DetectedFileBlock
from treesmith.models.results import DistributeResult, Outcome
from treesmith.utils import join_under

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (relative_path, status)

DEFAULT_EXTENSIONS = ("js", "jsx", "ts", "tsx", "py", "html", "css", "json", "java", "c", "cpp", "txt", "md")

_COMMENT_RE = re.compile(r"^\s*(?://|#|\*+|/\*|\*)")

# Blank lines after a file body in a collected blob: one after the content,
# two before the next header.
_SEPARATOR_LINES = 3


def header_pattern(extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> re.Pattern[str]:
    """Regex matching a path token ending in one of *extensions*.

    The extension must not be followed by a word character, so ``App.jsx``
    is never cut short to ``App.js``.
    """
    exts = sorted({e.lstrip(".") for e in extensions if e}, key=len, reverse=True)
    if not exts:
        raise ValueError("At least one file extension is required")
    alternation = "|".join(re.escape(e) for e in exts)
    return re.compile(rf"([\w\-./]*[\w\-]\.(?:{alternation}))(?!\w)", re.IGNORECASE)


def match_header(line: str, pattern: re.Pattern[str]) -> str | None:
    """Declared path of a header line, or None if *line* is not a header."""
    if not _COMMENT_RE.match(line):
        return None
    match = pattern.search(line)
    return match.group(1) if match else None


def detect_file_blocks(
    text: str,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[DetectedFileBlock]:
    """Split *text* at comment lines that name a file.

    Lines before the first header are dropped. Up to three trailing blank
    lines of a block (one for the last block) are the separator the collector
    writes after each file and are not part of it; further blank lines stay.
    Non-empty content always ends with one newline.
    """
    pattern = header_pattern(extensions)
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    blocks: list[DetectedFileBlock] = []
    current: str | None = None
    body: list[str] = []

    def flush(separator: int) -> None:
        if current is None:
            return
        while separator and body and not body[-1].strip():
            body.pop()
            separator -= 1
        content = "\n".join(body) + "\n" if body else ""
        blocks.append(DetectedFileBlock(path=current.lstrip("/"), content=content))

    for line in lines:
        path = match_header(line, pattern)
        if path is not None:
            flush(_SEPARATOR_LINES)
            current = path
            body = []
        elif current is not None:
            body.append(line)
    flush(1)

    return blocks


class Distributor:
    """Writes detected file blocks below a target directory.

    Every run starts with a pre-flight over all target paths; nothing is
    written when it finds a problem. Once writing starts, the first failing
    directory creation or write stops the batch and files already written
    stay on disk.
    """

    def __init__(self, fs: FilesystemAccessor, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        self.fs = fs
        self.extensions = tuple(extensions)

    def detect(self, text: str) -> list[DetectedFileBlock]:
        return detect_file_blocks(text, self.extensions)

    def plan(self, text: str, target_root: str) -> DistributeResult:
        """Validate without writing (dry run)."""
        return self.distribute(text, target_root, dry_run=True)

    def distribute(
        self,
        text: str,
        target_root: str,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> DistributeResult:
        if not target_root:
            return DistributeResult(outcome=Outcome.EMPTY, message="No project folder selected!", dry_run=dry_run)

        blocks = self.detect(text)
        if not blocks:
            return DistributeResult(
                outcome=Outcome.EMPTY,
                message="No files detected! Make sure header comments include a file path.",
                dry_run=dry_run,
            )

        planned = [join_under(target_root, block.path) for block in blocks]
        problems = self._preflight(blocks, planned, target_root)
        if problems:
            for problem in problems:
                log.warning("Pre-flight: %s", problem)
            return DistributeResult(
                outcome=Outcome.FAILED,
                blocks=blocks,
                planned=planned,
                problems=problems,
                error=problems[0],
                message=f"Pre-flight failed: {len(problems)} problem(s), nothing written",
                dry_run=dry_run,
            )

        if dry_run:
            return DistributeResult(
                outcome=Outcome.OK,
                blocks=blocks,
                planned=planned,
                message=f"{len(blocks)} file(s) would be written",
                dry_run=True,
            )

        written: list[str] = []
        for block, full_path in zip(blocks, planned):
            if on_progress:
                on_progress(block.path, "writing")
            error = self._write(full_path, block.content)
            if error:
                log.warning("Distribution stopped at %s: %s", full_path, error)
                if on_progress:
                    on_progress(block.path, "error")
                return DistributeResult(
                    outcome=Outcome.FAILED,
                    blocks=blocks,
                    planned=planned,
                    written=written,
                    error=error,
                    message=f"Error generating files: {error}",
                )
            written.append(full_path)
            if on_progress:
                on_progress(block.path, "done")

        log.info("Distributed %d files into %s", len(written), target_root)
        return DistributeResult(
            outcome=Outcome.OK,
            blocks=blocks,
            planned=planned,
            written=written,
            message="Files successfully generated!",
        )

    def _write(self, full_path: str, content: str) -> str:
        folder = self.fs.create_directory(os.path.dirname(full_path) or ".")
        if not folder.success:
            return folder.error or "Could not create directory"
        res = self.fs.write_file(full_path, content)
        if not res.success:
            return res.error or "Could not write file"
        return ""

    def _preflight(
        self,
        blocks: Sequence[DetectedFileBlock],
        planned: Sequence[str],
        target_root: str,
    ) -> list[str]:
        if self.fs.path_kind(target_root) != "dir":
            return [f"Target folder does not exist: {target_root}"]

        problems: list[str] = []
        kinds: dict[str, str | None] = {}

        def kind(path: str) -> str | None:
            if path not in kinds:
                kinds[path] = self.fs.path_kind(path)
            return kinds[path]

        root = os.path.normpath(target_root)
        batch_files = {os.path.normpath(p) for p in planned}
        for block, full_path in zip(blocks, planned):
            if ".." in block.path.replace("\\", "/").split("/"):
                problems.append(f"{block.path}: path leaves the target folder")
                continue
            if kind(full_path) == "dir":
                problems.append(f"{block.path}: a directory exists at this path")
                continue
            parent = os.path.dirname(full_path)
            while parent and os.path.normpath(parent) != root:
                if kind(parent) == "file":
                    problems.append(f"{block.path}: {parent} is a file, not a directory")
                    break
                if os.path.normpath(parent) in batch_files:
                    problems.append(f"{block.path}: {parent} is also written as a file in this batch")
                    break
                if os.path.dirname(parent) == parent:
                    break
                parent = os.path.dirname(parent)
        return problems
