"""
Batch enrichment: block hash and revert rate for every record of a transfer page.

Records are processed in waves of at most `concurrency` tasks. Each wave runs on
its own thread pool and must finish before the next one starts, which bounds the
number of node calls in flight. A task never raises: it hands its outcome back
through its future and the coordinating thread applies record writes and
collects failures, so worker threads share no mutable state.

Per-item errors never stop sibling tasks or later waves. Once every record has
been attempted, any failure turns the whole call into BatchEnrichmentFailed.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Sequence

from conflux_wallet.config.settings import EnricherConfig
from conflux_wallet.core.exceptions import BatchEnrichmentFailed, PerItemEnrichmentError
from conflux_wallet.node.port import NodeQueryPort
from conflux_wallet.scan_client.models import TransferRecord
from conflux_wallet.wallet_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _ItemOutcome:
    block_hash: str | None = None
    revert_rate: float | None = None
    error: str | None = None


def wave_bounds(total: int, concurrency: int) -> list[tuple[int, int]]:
    """[start, end) index ranges of each wave: sizes min(concurrency, remaining)."""
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")
    return [(start, min(start + concurrency, total)) for start in range(0, total, concurrency)]


class BatchEnricher:
    """Fills TransferRecord.block_hash / revert_rate in place using a NodeQueryPort."""

    def __init__(self, node: NodeQueryPort, config: EnricherConfig | None = None) -> None:
        self._node = node
        self._config = config or EnricherConfig()

    @property
    def concurrency(self) -> int:
        return self._config.concurrency

    def enrich(self, records: list[TransferRecord]) -> list[TransferRecord]:
        """
        Enrich every record and return the same list, order untouched.

        A record whose transaction is not mined yet is a success with both
        fields left as None.

        Raises:
            BatchEnrichmentFailed: one or more records failed; lists each
                failure in record order. Records that did enrich keep their values.
        """
        if not records:
            return records

        bounds = wave_bounds(len(records), self._config.concurrency)
        logger.info(
            "enrich_started",
            records=len(records),
            concurrency=self._config.concurrency,
            waves=len(bounds),
        )
        started = time.monotonic()
        failures: list[PerItemEnrichmentError] = []
        for wave_no, (start, end) in enumerate(bounds, 1):
            wave_failures = self._run_wave(records, start, end)
            failures.extend(wave_failures)
            logger.debug(
                "enrich_wave_done",
                wave=wave_no,
                size=end - start,
                failures=len(wave_failures),
            )

        logger.info(
            "enrich_done",
            records=len(records),
            failures=len(failures),
            duration_sec=round(time.monotonic() - started, 3),
        )
        if failures:
            raise BatchEnrichmentFailed(failures)
        return records

    def _run_wave(self, records: list[TransferRecord], start: int, end: int) -> list[PerItemEnrichmentError]:
        """
        Run records[start:end] concurrently and apply outcomes in record order.

        With a task timeout, tasks still running at the deadline are told to stop
        before their next node call and count as failed. The wave always waits for
        them to exit, so node calls in flight never exceed the concurrency ceiling,
        not even across consecutive enrich calls. A task that had already resolved
        its block keeps the block hash and fails on the confidence step; any other
        late result is discarded.
        """
        timeout = self._config.task_timeout_sec
        cancelled = threading.Event()
        executor = ThreadPoolExecutor(max_workers=end - start, thread_name_prefix="enrich")
        futures: dict[int, Future[_ItemOutcome]] = {}
        not_done: set[Future[_ItemOutcome]] = set()
        try:
            for i in range(start, end):
                futures[i] = executor.submit(self._enrich_one, records[i].transaction_hash, cancelled)
            _, not_done = wait(futures.values(), timeout=timeout)
            if not_done:
                cancelled.set()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        failures: list[PerItemEnrichmentError] = []
        for i, fut in futures.items():
            record = records[i]
            outcome = _ItemOutcome() if fut.cancelled() else fut.result()
            if fut in not_done:
                outcome = _timed_out(record.transaction_hash, outcome.block_hash, timeout)
            if outcome.block_hash is not None:
                record.block_hash = outcome.block_hash
            if outcome.revert_rate is not None:
                record.revert_rate = outcome.revert_rate
            if outcome.error is not None:
                logger.warning(
                    "enrich_item_failed",
                    index=i,
                    tx_hash=record.transaction_hash,
                    error=outcome.error,
                )
                failures.append(PerItemEnrichmentError(i, record.transaction_hash, outcome.error))
        return failures

    def _enrich_one(self, tx_hash: str, cancelled: threading.Event) -> _ItemOutcome:
        """One record: resolve containing block, then its revert rate. Never raises."""
        try:
            block_hash = self._node.resolve_block_of_transaction(tx_hash)
        except Exception as e:
            return _ItemOutcome(error=f"resolve block for tx {tx_hash}: {e}")
        if cancelled.is_set():
            # block answered after the deadline
            return _ItemOutcome()
        if block_hash is None:
            return _ItemOutcome()
        try:
            rate = self._node.resolve_block_confidence(block_hash)
        except Exception as e:
            return _ItemOutcome(
                block_hash=block_hash,
                error=f"resolve confidence for block {block_hash} of tx {tx_hash}: {e}",
            )
        return _ItemOutcome(block_hash=block_hash, revert_rate=rate)


def _timed_out(tx_hash: str, block_hash: str | None, timeout: float | None) -> _ItemOutcome:
    if block_hash is None:
        return _ItemOutcome(error=f"resolve block for tx {tx_hash}: timed out after {timeout}s")
    return _ItemOutcome(
        block_hash=block_hash,
        error=f"resolve confidence for block {block_hash} of tx {tx_hash}: timed out after {timeout}s",
    )


def enrich_records(
    records: Sequence[TransferRecord],
    node: NodeQueryPort,
    config: EnricherConfig | None = None,
) -> list[TransferRecord]:
    """Convenience wrapper around BatchEnricher(node, config).enrich()."""
    batch = records if isinstance(records, list) else list(records)
    return BatchEnricher(node, config).enrich(batch)
