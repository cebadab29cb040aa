"""Standardization planning for record finding groups.

Turns a finding group plus a chosen catalog type into the write-set that
rewrites every record in the group to the type's canonical name and
function. No writes happen here.
"""

from dataclasses import dataclass

import structlog

from cert_irregularity.config import DetectionConfig
from cert_irregularity.exceptions import PlannerContractError
from cert_irregularity.models import (
    STANDARDIZABLE_SEVERITIES,
    CertificationType,
    FindingGroup,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StandardizationPlan:
    """Records to rewrite and the values to write.

    Attributes:
        group_index: Number of the group this plan resolves.
        record_ids: Every record in the group.
        new_name: Canonical name (the target type's full name).
        new_function: Canonical function.
        target_type_id: Catalog type the records are standardized toward.
    """

    group_index: int
    record_ids: tuple[str, ...]
    new_name: str
    new_function: str
    target_type_id: str


def plan_standardization(
    group: FindingGroup,
    target_type: CertificationType | None,
    *,
    config: DetectionConfig | None = None,
) -> StandardizationPlan:
    """Plan the standardization of a record group onto a catalog type.

    Args:
        group: An exact, similar or function_mismatch group.
        target_type: Active catalog type chosen by the reviewer.
        config: Supplies the fallback function for types without one.

    Returns:
        The write-set to hand to the executor.

    Raises:
        PlannerContractError: For type-duplicate groups, empty groups, or a
            missing or deactivated target.
    """
    config = config or DetectionConfig()

    if group.severity not in STANDARDIZABLE_SEVERITIES:
        msg = f"Group {group.index}: {group.severity.value} findings cannot be standardized"
        raise PlannerContractError(msg)
    if not group.records:
        msg = f"Group {group.index} has no records to standardize"
        raise PlannerContractError(msg)
    if target_type is None:
        msg = f"Group {group.index}: a target type is required"
        raise PlannerContractError(msg)
    if not target_type.is_active:
        msg = f"Group {group.index}: type {target_type.id} is deactivated"
        raise PlannerContractError(msg)

    plan = StandardizationPlan(
        group_index=group.index,
        record_ids=tuple(record.id for record in group.records),
        new_name=target_type.full_name,
        new_function=target_type.function or config.default_function,
        target_type_id=target_type.id,
    )

    logger.info(
        "Standardization planned",
        group=group.index,
        records=len(plan.record_ids),
        target=target_type.full_name,
    )

    return plan
