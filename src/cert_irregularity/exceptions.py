"""Custom exceptions for the certification irregularity engine.

Provides a hierarchy of exceptions for different error conditions:
- IrregularityError: Base exception for all engine errors
- InputError: Malformed record/type skipped at the input boundary
- ComputationDefectError: Invariant violated inside the classifier
- PlannerContractError: Invalid group/severity/target given to a planner
- WriteConflictError: Planned write hit data that changed since detection
- PartialWriteError: Some record writes of a group failed
- WriteInProgressError: A write for the same group is still outstanding
- InvalidTransitionError: Illegal finding-group lifecycle transition
"""


class IrregularityError(Exception):
    """Base exception for irregularity engine errors."""


class InputError(IrregularityError):
    """A record or type entity could not be parsed.

    The classifier skips the offending entity instead of aborting
    the run; callers receive these to log or report the skip.

    Attributes:
        entity_kind: "record" or "type".
        entity_id: Identifier of the entity, if one could be read.
    """

    def __init__(self, entity_kind: str, entity_id: str | None, message: str) -> None:
        """Initialize InputError.

        Args:
            entity_kind: "record" or "type".
            entity_id: Identifier of the entity, if one could be read.
            message: Description of what was wrong.
        """
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        label = entity_id if entity_id else "<unknown>"
        super().__init__(f"Skipped {entity_kind} {label}: {message}")


class ComputationDefectError(IrregularityError):
    """An invariant was violated inside the classifier.

    This is a programming bug. Callers must treat it as
    "classification unavailable", never as "zero findings".
    """


class PlannerContractError(IrregularityError):
    """A planner was called with an invalid group or target.

    Raised before any write is attempted.
    """


class WriteConflictError(IrregularityError):
    """A planned write failed because the underlying records changed.

    Attributes:
        group_index: Number of the stale finding group, if known.
    """

    def __init__(self, message: str, group_index: int | None = None) -> None:
        """Initialize WriteConflictError.

        Args:
            message: Description of the conflict.
            group_index: Number of the stale finding group, if known.
        """
        self.group_index = group_index
        super().__init__(f"{message} (this group is stale, please refresh)")


class PartialWriteError(IrregularityError):
    """Some of the record writes for a group failed.

    Attributes:
        failed_ids: Identifiers of the records that were not written.
    """

    def __init__(self, failed_ids: list[str], message: str = "") -> None:
        """Initialize PartialWriteError.

        Args:
            failed_ids: Identifiers of the records that were not written.
            message: Optional extra detail from the executor.
        """
        self.failed_ids = list(failed_ids)
        detail = f": {message}" if message else ""
        super().__init__(
            f"Failed to update {len(self.failed_ids)} records "
            f"({', '.join(self.failed_ids)}){detail}"
        )


class WriteInProgressError(IrregularityError):
    """A write for this finding group is still outstanding."""

    def __init__(self, group_index: int) -> None:
        """Initialize WriteInProgressError.

        Args:
            group_index: Number of the busy finding group.
        """
        self.group_index = group_index
        super().__init__(f"A write for group {group_index} is already in progress")


class InvalidTransitionError(IrregularityError):
    """A finding group cannot move between the requested states."""

    def __init__(self, group_index: int, current: str, target: str) -> None:
        """Initialize InvalidTransitionError.

        Args:
            group_index: Number of the finding group.
            current: Current state value.
            target: Requested state value.
        """
        self.group_index = group_index
        super().__init__(f"Group {group_index} cannot move from {current} to {target}")
