"""Input boundary for records and catalog types.

Raw mappings coming from the data-access layer are validated here. Entities
that cannot be parsed (missing id or owner, wrong shapes) are skipped and
reported as ``InputError`` instead of aborting the whole run.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError
import structlog

from cert_irregularity.exceptions import InputError
from cert_irregularity.models import CertificationRecord, CertificationType

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ParseResult(Generic[ModelT]):
    """Parsed entities plus the ones that were skipped.

    Attributes:
        items: Successfully parsed models, in input order.
        errors: One InputError per skipped entity.
    """

    items: list[ModelT] = field(default_factory=list)
    errors: list[InputError] = field(default_factory=list)


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(loc) for loc in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def _parse(
    raw_items: Iterable[Any],
    model: type[ModelT],
    entity_kind: str,
) -> ParseResult[ModelT]:
    result: ParseResult[ModelT] = ParseResult()

    for raw in raw_items:
        if isinstance(raw, model):
            result.items.append(raw)
            continue

        raw_id = raw.get("id") if isinstance(raw, Mapping) else None
        entity_id = None if raw_id is None else str(raw_id)
        try:
            result.items.append(model.model_validate(raw))
        except ValidationError as e:
            error = InputError(entity_kind, entity_id, _describe(e))
            result.errors.append(error)
            logger.warning(
                "Skipping malformed entity",
                kind=entity_kind,
                entity_id=error.entity_id,
                reason=str(error),
            )

    return result


def parse_records(raw_records: Iterable[Any]) -> ParseResult[CertificationRecord]:
    """Validate raw certification records.

    Args:
        raw_records: Models or mappings from the record source.

    Returns:
        Parsed records and the errors for skipped ones.
    """
    return _parse(raw_records, CertificationRecord, "record")


def parse_types(raw_types: Iterable[Any]) -> ParseResult[CertificationType]:
    """Validate raw certification catalog types.

    Args:
        raw_types: Models or mappings from the type-catalog source.

    Returns:
        Parsed types and the errors for skipped ones.
    """
    return _parse(raw_types, CertificationType, "type")
