"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from hrsync.adapters.diagnostics import DISABLED_DUMPER, PayloadDumper
from hrsync.adapters.pipefy import PipefyClient, PipefyWorkflowStore, iter_phase_cards
from hrsync.adapters.sinergy import SinergyAuthoritativeSource, SinergyClient
from hrsync.adapters.snapshot import load_snapshot, write_snapshot
from hrsync.config import get_pipefy_config, get_sinergy_config, get_storage_config
from hrsync.domain.canonicalization import Canonicalizer
from hrsync.domain.diff import Differ
from hrsync.domain.mapping import DEFAULT_FIELD_TABLE
from hrsync.domain.reconciliation import (
    NewRecordDetector,
    Reconciler,
    require_employee_list,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from hrsync.config import PipefyConfig, StorageConfig
    from hrsync.domain.mapping import FieldMappingTable
    from hrsync.domain.ports import AuthoritativeSource, WorkflowStore
    from hrsync.domain.reconciliation import CreationSummary, ReconciliationSummary

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    cards: int
    snapshot_path: Path


@dataclass(frozen=True, slots=True)
class DailySyncResult:
    extraction: ExtractionResult
    reconciliation: ReconciliationSummary
    creation: CreationSummary


def build_pipefy_client(config: PipefyConfig | None = None) -> PipefyClient:
    return PipefyClient(config or get_pipefy_config())


def build_sinergy_source(storage: StorageConfig | None = None) -> SinergyAuthoritativeSource:
    storage = storage or get_storage_config()
    dumper = PayloadDumper(storage.debug_dir(ensure=False)) if storage.debug else DISABLED_DUMPER
    config = get_sinergy_config()
    return SinergyAuthoritativeSource(SinergyClient(config), config, dumper=dumper)


def extract_active_cards(
    *,
    client: PipefyClient | None = None,
    snapshot_path: Path | None = None,
    phase_id: str | None = None,
    storage: StorageConfig | None = None,
) -> ExtractionResult:
    """Harvest every card of the active phase and write the snapshot."""

    with ExitStack() as stack:
        effective_client = client or stack.enter_context(build_pipefy_client())
        config = effective_client.config
        effective_phase = phase_id or config.require_active_phase_id()
        path = snapshot_path or (storage or get_storage_config()).snapshot_path()

        log.info("Fetching active cards of phase %s", effective_phase)
        cards = list(iter_phase_cards(effective_client, effective_phase, config.page_size))
    log.info("Total active cards fetched: %s", len(cards))
    written = write_snapshot(path, cards)
    return ExtractionResult(cards=written, snapshot_path=path)


def sync_existing_cards(
    *,
    snapshot_path: Path | None = None,
    source: AuthoritativeSource | None = None,
    store: WorkflowStore | None = None,
    table: FieldMappingTable = DEFAULT_FIELD_TABLE,
    storage: StorageConfig | None = None,
) -> ReconciliationSummary:
    """Reconcile every card of the snapshot against the HR feed."""

    storage = storage or get_storage_config()
    cards = load_snapshot(snapshot_path or storage.snapshot_path(ensure=False))
    with ExitStack() as stack:
        if source is None:
            source = stack.enter_context(build_sinergy_source(storage))
        if store is None:
            store = PipefyWorkflowStore(stack.enter_context(build_pipefy_client()))
        reconciler = Reconciler(
            canonicalizer=Canonicalizer(table),
            differ=Differ(table),
            source=source,
            store=store,
        )
        return reconciler.reconcile(cards)


def sync_new_employees(
    *,
    snapshot_path: Path | None = None,
    source: AuthoritativeSource | None = None,
    store: WorkflowStore | None = None,
    table: FieldMappingTable = DEFAULT_FIELD_TABLE,
    today: Callable[[], date] = date.today,
    storage: StorageConfig | None = None,
) -> CreationSummary:
    """Create cards for HR-active employees missing from the snapshot."""

    storage = storage or get_storage_config()
    cards = load_snapshot(snapshot_path or storage.snapshot_path(ensure=False))
    with ExitStack() as stack:
        if store is None:
            config = get_pipefy_config()
            pipe_id = config.require_pipe_id()
            store = PipefyWorkflowStore(
                stack.enter_context(build_pipefy_client(config)), pipe_id=pipe_id
            )
        if source is None:
            source = stack.enter_context(build_sinergy_source(storage))

        employees = require_employee_list(source.list_active())
        detector = NewRecordDetector(Canonicalizer(table), today=today)
        report = detector.detect(employees, cards)
        return detector.create_missing(report, store)


def run_daily_sync(
    *,
    snapshot_path: Path | None = None,
    storage: StorageConfig | None = None,
) -> DailySyncResult:
    """Extract, reconcile and create, in that order; any fatal error stops the routine."""

    storage = storage or get_storage_config()
    path = snapshot_path or storage.snapshot_path()
    pipefy_config = get_pipefy_config()
    pipefy_config.require_active_phase_id()
    pipe_id = pipefy_config.require_pipe_id()
    with (
        build_pipefy_client(pipefy_config) as pipefy,
        build_sinergy_source(storage) as sinergy,
    ):
        log.info("=== [1/3] Extracting active cards ===")
        extraction = extract_active_cards(client=pipefy, snapshot_path=path)

        log.info("=== [2/3] Syncing existing cards ===")
        reconciliation = sync_existing_cards(
            snapshot_path=path,
            source=sinergy,
            store=PipefyWorkflowStore(pipefy),
        )

        log.info("=== [3/3] Creating cards for new employees ===")
        creation = sync_new_employees(
            snapshot_path=path,
            source=sinergy,
            store=PipefyWorkflowStore(pipefy, pipe_id=pipe_id),
        )

    log.info("Daily sync routine finished")
    return DailySyncResult(
        extraction=extraction,
        reconciliation=reconciliation,
        creation=creation,
    )
