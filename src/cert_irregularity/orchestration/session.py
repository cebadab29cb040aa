"""Review session: the calling layer around the pure classifier.

A ``ReviewSession`` loads records and catalog types from external sources,
classifies them off the event loop, tracks each finding group through its
review lifecycle, and applies planned write-sets through an external
executor. Group lifecycle:

    DETECTED -> REVIEWING -> APPLIED | DISMISSED
    REVIEWING -> DETECTED   (write failed or review cancelled)

A successful apply triggers one debounced re-classification; a group that no
longer appears afterwards is resolved.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from enum import Enum
from typing import Any, Protocol, TypeVar

import structlog

from cert_irregularity.config import DetectionConfig, RefreshConfig
from cert_irregularity.detection import (
    FindingStats,
    classify,
    filter_by_severity,
    parse_records,
    parse_types,
    remove_name,
    summarize,
)
from cert_irregularity.exceptions import (
    InputError,
    InvalidTransitionError,
    PlannerContractError,
    WriteInProgressError,
)
from cert_irregularity.models import (
    CertificationRecord,
    CertificationType,
    DuplicateExclusion,
    FindingGroup,
    Severity,
)
from cert_irregularity.orchestration.scheduler import RefreshScheduler
from cert_irregularity.planning import (
    ConsolidationPlan,
    MergePlan,
    StandardizationPlan,
    plan_group_consolidation,
    plan_merge,
    plan_standardization,
    recommend_survivor,
)
from cert_irregularity.utils.retry import fetch_with_retry

logger = structlog.get_logger(__name__)

PlanT = TypeVar("PlanT")


class RecordSource(Protocol):
    """Supplies certification records from the external store."""

    async def fetch_records(self) -> Sequence[CertificationRecord | Mapping[str, Any]]: ...


class TypeCatalogSource(Protocol):
    """Supplies certification catalog types from the external store."""

    async def fetch_types(self) -> Sequence[CertificationType | Mapping[str, Any]]: ...


class ExclusionSource(Protocol):
    """Supplies reviewer-confirmed "not a duplicate" pairs."""

    async def fetch_exclusions(self) -> Sequence[DuplicateExclusion]: ...


class WriteExecutor(Protocol):
    """Applies planned write-sets against the external store.

    Implementations should apply each plan atomically. On failure they raise
    WriteConflictError (stale data) or PartialWriteError (naming the records
    that failed); they must not retry on their own.
    """

    async def apply_standardization(self, plan: StandardizationPlan) -> None: ...

    async def apply_consolidation(self, plan: ConsolidationPlan) -> None: ...

    async def apply_merge(self, plan: MergePlan) -> None: ...


class GroupState(str, Enum):
    """Review lifecycle state of a finding group."""

    DETECTED = "detected"
    REVIEWING = "reviewing"
    APPLIED = "applied"
    DISMISSED = "dismissed"


_TRANSITIONS: dict[GroupState, frozenset[GroupState]] = {
    GroupState.DETECTED: frozenset({GroupState.REVIEWING, GroupState.DISMISSED}),
    GroupState.REVIEWING: frozenset(
        {GroupState.DETECTED, GroupState.APPLIED, GroupState.DISMISSED}
    ),
    GroupState.APPLIED: frozenset(),
    GroupState.DISMISSED: frozenset(),
}


class ReviewSession:
    """One reviewer's view of the current irregularities.

    Example:
        >>> session = ReviewSession(records_repo, types_repo, executor)
        >>> groups = await session.refresh()
        >>> await session.apply_standardization(groups[0].index)
        >>> await session.scheduler.wait_idle()  # re-classified once
    """

    def __init__(
        self,
        record_source: RecordSource,
        type_source: TypeCatalogSource,
        executor: WriteExecutor,
        exclusion_source: ExclusionSource | None = None,
        detection_config: DetectionConfig | None = None,
        refresh_config: RefreshConfig | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            record_source: Record source.
            type_source: Catalog type source.
            executor: Write executor for planned write-sets.
            exclusion_source: Optional source of excluded pairs.
            detection_config: Classifier thresholds.
            refresh_config: Debounce and retry settings.
        """
        self.record_source = record_source
        self.type_source = type_source
        self.executor = executor
        self.exclusion_source = exclusion_source
        self.detection_config = detection_config or DetectionConfig()
        self.refresh_config = refresh_config or RefreshConfig()
        self.scheduler = RefreshScheduler(self.refresh, self.refresh_config.debounce_seconds)

        self._records: list[CertificationRecord] = []
        self._types: list[CertificationType] = []
        self._groups: list[FindingGroup] = []
        self._states: dict[int, GroupState] = {}
        self._in_flight: set[int] = set()
        self._generation = 0
        self._closed = False
        self.skipped: list[InputError] = []

    # ─── Classification ───────────────────────────────────────────────────

    async def refresh(self) -> list[FindingGroup]:
        """Reload both collections and re-run classification.

        Classification runs in a worker thread so the event loop stays
        responsive. A result computed after ``close()`` is discarded.

        Returns:
            The new group list.

        Raises:
            ComputationDefectError: If the classifier hit an internal defect;
                the previous groups are left untouched.
        """
        attempts = self.refresh_config.source_retry_attempts
        raw_records = await fetch_with_retry(self.record_source.fetch_records, attempts)
        raw_types = await fetch_with_retry(self.type_source.fetch_types, attempts)
        exclusions: Sequence[DuplicateExclusion] = ()
        if self.exclusion_source is not None:
            exclusions = await fetch_with_retry(self.exclusion_source.fetch_exclusions, attempts)

        parsed_records = parse_records(raw_records)
        parsed_types = parse_types(raw_types)

        groups = await asyncio.to_thread(
            classify,
            parsed_records.items,
            parsed_types.items,
            exclusions=exclusions,
            config=self.detection_config,
        )

        if self._closed:
            logger.info("Discarding classification for closed session", groups=len(groups))
            return []

        self._records = parsed_records.items
        self._types = parsed_types.items
        self.skipped = parsed_records.errors + parsed_types.errors
        self._groups = groups
        self._states = {group.index: GroupState.DETECTED for group in groups}
        self._generation += 1

        logger.info(
            "Session refreshed",
            groups=len(groups),
            skipped=len(self.skipped),
            generation=self._generation,
        )

        return list(groups)

    def close(self) -> None:
        """Stop scheduling refreshes and discard any in-flight result."""
        self._closed = True
        self.scheduler.cancel()

    # ─── Views ────────────────────────────────────────────────────────────

    @property
    def groups(self) -> list[FindingGroup]:
        """All groups of the current classification, including reviewed ones."""
        return list(self._groups)

    @property
    def records(self) -> list[CertificationRecord]:
        """Records of the last refresh."""
        return list(self._records)

    def open_groups(self, severity: Severity | str = "all") -> list[FindingGroup]:
        """Groups still awaiting a decision, optionally of one severity.

        Args:
            severity: A Severity, its value, or "all".

        Returns:
            Groups not yet applied or dismissed, in classification order.
        """
        pending = [
            group
            for group in self._groups
            if self._states.get(group.index)
            not in (GroupState.APPLIED, GroupState.DISMISSED)
        ]
        return filter_by_severity(pending, severity)

    def stats(self) -> FindingStats:
        """Dashboard statistics for the current classification."""
        return summarize(self._groups, len(self._records))

    def get_group(self, group_index: int) -> FindingGroup:
        """Look up a group by its stable number.

        Raises:
            PlannerContractError: If no such group exists.
        """
        for group in self._groups:
            if group.index == group_index:
                return group
        msg = f"No finding group {group_index} in the current classification"
        raise PlannerContractError(msg)

    def state_of(self, group_index: int) -> GroupState:
        """Current lifecycle state of a group."""
        self.get_group(group_index)
        return self._states[group_index]

    def is_applying(self, group_index: int) -> bool:
        """Whether a write for this group is outstanding."""
        return group_index in self._in_flight

    # ─── Reviewer actions ─────────────────────────────────────────────────

    def begin_review(self, group_index: int) -> None:
        """Mark a group as under review."""
        self._transition(group_index, GroupState.REVIEWING)

    def cancel_review(self, group_index: int) -> None:
        """Return a reviewed group to the detected state."""
        self._transition(group_index, GroupState.DETECTED)

    def dismiss(self, group_index: int) -> None:
        """Dismiss a group without writing anything."""
        self._transition(group_index, GroupState.DISMISSED)

    def remove_name(self, group_index: int, name: str) -> list[FindingGroup]:
        """Remove one name from a displayed group (view-local only).

        Args:
            group_index: Stable number of the group.
            name: Raw name to remove.

        Returns:
            The updated group list.
        """
        self._groups = remove_name(self._groups, group_index, name)
        remaining = {group.index for group in self._groups}
        self._states = {i: s for i, s in self._states.items() if i in remaining}
        return list(self._groups)

    def recommend_survivor(self, group_index: int) -> str | None:
        """Recommend which duplicate type to keep, or None when tied."""
        return recommend_survivor(self.get_group(group_index).types, self._records)

    async def apply_standardization(
        self,
        group_index: int,
        target_type: CertificationType | None = None,
    ) -> StandardizationPlan:
        """Standardize a record group onto a catalog type.

        Args:
            group_index: Stable number of the group.
            target_type: Type chosen by the reviewer; defaults to the
                group's suggested type.

        Returns:
            The plan that was applied.
        """
        group = self.get_group(group_index)
        plan = plan_standardization(
            group, target_type or group.suggested_type, config=self.detection_config
        )
        return await self._apply(group_index, plan, self.executor.apply_standardization)

    async def apply_consolidation(self, group_index: int, survivor_id: str) -> ConsolidationPlan:
        """Consolidate a duplicate-type group onto the chosen survivor.

        Args:
            group_index: Stable number of the group.
            survivor_id: Identifier of the type to keep.

        Returns:
            The plan that was applied.
        """
        plan = plan_group_consolidation(self.get_group(group_index), survivor_id)
        return await self._apply(group_index, plan, self.executor.apply_consolidation)

    async def apply_merge(self, group_index: int) -> MergePlan:
        """Merge an exact-duplicate group into its most recent record.

        Args:
            group_index: Stable number of the group.

        Returns:
            The plan that was applied.
        """
        plan = plan_merge(self.get_group(group_index))
        return await self._apply(group_index, plan, self.executor.apply_merge)

    # ─── Internals ────────────────────────────────────────────────────────

    async def _apply(
        self,
        group_index: int,
        plan: PlanT,
        write: Callable[[PlanT], Awaitable[None]],
    ) -> PlanT:
        if group_index in self._in_flight:
            raise WriteInProgressError(group_index)
        if self._states[group_index] is GroupState.DETECTED:
            self._transition(group_index, GroupState.REVIEWING)
        elif self._states[group_index] is not GroupState.REVIEWING:
            raise InvalidTransitionError(
                group_index, self._states[group_index].value, GroupState.APPLIED.value
            )

        generation = self._generation
        self._in_flight.add(group_index)
        try:
            await write(plan)
        except Exception as e:
            logger.warning("Write failed", group=group_index, error=str(e))
            if self._still_tracked(group_index, generation):
                self._transition(group_index, GroupState.DETECTED)
            raise
        finally:
            self._in_flight.discard(group_index)

        if self._still_tracked(group_index, generation):
            self._transition(group_index, GroupState.APPLIED)
        logger.info("Write applied", group=group_index, plan=type(plan).__name__)

        if not self._closed:
            self.scheduler.trigger()
        return plan

    def _still_tracked(self, group_index: int, generation: int) -> bool:
        # A refresh or a view-local removal may have replaced the group mid-write
        return generation == self._generation and group_index in self._states

    def _transition(self, group_index: int, target: GroupState) -> None:
        current = self.state_of(group_index)
        if target not in _TRANSITIONS[current]:
            raise InvalidTransitionError(group_index, current.value, target.value)
        self._states[group_index] = target
