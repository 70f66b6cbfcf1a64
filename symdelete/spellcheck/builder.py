from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Iterable

from symdelete.spellcheck.index import (
    DictionaryIndex,
    PartialIndex,
    RawEntry,
    build_partial,
    coerce_entry,
    merge_partials,
    partition,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_PROGRESS_INTERVAL = 10000


class BuildAbortedError(RuntimeError):
    pass


class ReadinessGate:
    """One-shot completion signal for an index build.

    The gate completes exactly once, either with a fully built index or with
    the error that stopped the build. Waiters never see anything in between.
    """

    def __init__(self) -> None:
        self._future: Future[DictionaryIndex] = Future()
        self._lock = threading.Lock()

    def _complete(self, index: DictionaryIndex | None, error: BaseException | None) -> None:
        with self._lock:
            if self._future.done():
                raise RuntimeError("readiness gate has already been completed")
            if error is not None:
                self._future.set_exception(error)
            else:
                self._future.set_result(index)

    def open(self, index: DictionaryIndex) -> None:
        self._complete(index, None)

    def fail(self, error: BaseException) -> None:
        self._complete(None, error)

    def is_ready(self) -> bool:
        return self._future.done() and self._future.exception() is None

    def is_done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: float | None = None) -> DictionaryIndex:
        return self._future.result(timeout=timeout)

    def as_future(self) -> Future[DictionaryIndex]:
        return self._future


class IndexBuilder:
    def __init__(
        self,
        max_distance: int,
        *,
        workers: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        if max_distance < 0:
            raise ValueError(f"max_distance must be >= 0, got {max_distance}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.max_distance = max_distance
        self.workers = max(1, workers or os.cpu_count() or 4)
        self.chunk_size = chunk_size
        self.progress_interval = max(1, progress_interval)
        self._abort = threading.Event()
        self._thread: threading.Thread | None = None
        self.gate = ReadinessGate()

    def start(self, words: Iterable[RawEntry]) -> ReadinessGate:
        if self._thread is not None:
            raise RuntimeError("index build already started")
        self._thread = threading.Thread(
            target=self._run,
            args=(words,),
            name="index-builder",
            daemon=True,
        )
        self._thread.start()
        return self.gate

    def build(self, words: Iterable[RawEntry]) -> DictionaryIndex:
        if self._thread is not None:
            raise RuntimeError("index build already started")
        self._thread = threading.current_thread()
        self._run(words)
        return self.gate.wait()

    def abort(self) -> None:
        self._abort.set()

    def _run(self, words: Iterable[RawEntry]) -> None:
        try:
            index = self._build(words)
        except BuildAbortedError as exc:
            logger.warning("index build aborted; discarding partial index")
            self.gate.fail(exc)
            return
        except Exception as exc:
            logger.exception("index build failed")
            self.gate.fail(exc)
            return
        self.gate.open(index)

    def _check_aborted(self) -> None:
        if self._abort.is_set():
            raise BuildAbortedError("index build was aborted")

    def _build(self, words: Iterable[RawEntry]) -> DictionaryIndex:
        started = time.perf_counter()
        self._check_aborted()

        entries = []
        skipped = 0
        for raw in words:
            entry = coerce_entry(raw)
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

        logger.info(
            "building index: words=%s skipped=%s max_distance=%s workers=%s chunk_size=%s",
            len(entries),
            skipped,
            self.max_distance,
            self.workers,
            self.chunk_size,
        )

        partials: list[PartialIndex] = []
        processed = 0
        next_report = self.progress_interval

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="index-chunk") as executor:
            pending = {
                executor.submit(build_partial, chunk, self.max_distance): len(chunk)
                for chunk in partition(entries, self.chunk_size)
            }
            try:
                while pending:
                    done, _ = wait(pending, timeout=0.1, return_when=FIRST_COMPLETED)
                    self._check_aborted()
                    for future in done:
                        processed += pending.pop(future)
                        partials.append(future.result())
                    if processed >= next_report:
                        logger.info("processed %s/%s words", processed, len(entries))
                        while next_report <= processed:
                            next_report += self.progress_interval
            except BaseException:
                for future in pending:
                    future.cancel()
                raise

        index = merge_partials(partials, self.max_distance)
        self._check_aborted()

        elapsed = time.perf_counter() - started
        logger.info(
            "finished building index in %.3fs: words=%s variants=%s",
            elapsed,
            len(index),
            len(index.variants),
        )
        return index


def build_index(
    words: Iterable[RawEntry],
    max_distance: int,
    *,
    workers: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> DictionaryIndex:
    builder = IndexBuilder(
        max_distance,
        workers=workers,
        chunk_size=chunk_size,
        progress_interval=progress_interval,
    )
    return builder.build(words)
