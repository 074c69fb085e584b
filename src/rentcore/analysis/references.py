from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from rentcore.adapters.logging_utils import get_logger, log_context
from rentcore.domain.errors import ReportWarning
from rentcore.domain.property import Property

logger = get_logger(__name__)

R = TypeVar("R")


def known_records(
    records: Iterable[R],
    known_ids: set[str],
    kind: str,
    warnings: list[ReportWarning],
) -> list[R]:
    """
    Keep the records whose ``property_id`` is in ``known_ids``.

    Orphans are dropped from totals and reported, never raised: one stale
    lease must not sink a whole report.
    """
    kept: list[R] = []
    for record in records:
        pid = getattr(record, "property_id")
        if pid in known_ids:
            kept.append(record)
            continue
        warning = ReportWarning(
            code="MISSING_PROPERTY",
            message=f"{kind} references unknown property {pid!r}; excluded from totals",
            context={"kind": kind, "property_id": pid},
        )
        warnings.append(warning)
        logger.warning("missing_property_reference", extra=log_context(**warning.context))
    return kept


def select_properties(
    properties: Sequence[Property],
    property_ids: Iterable[str] | None,
    warnings: list[ReportWarning],
) -> list[Property]:
    """
    Apply an optional property filter, reporting filter ids that match nothing.

    A property id listed twice keeps its first record; later copies are
    reported and dropped so their income is not counted again.
    """
    by_id: dict[str, Property] = {}
    for prop in properties:
        if prop.id in by_id:
            warning = ReportWarning(
                code="DUPLICATE_PROPERTY",
                message=f"property {prop.id!r} is listed more than once; extra copies ignored",
                context={"property_id": prop.id},
            )
            warnings.append(warning)
            logger.warning("duplicate_property", extra=log_context(**warning.context))
            continue
        by_id[prop.id] = prop

    if property_ids is None:
        return list(by_id.values())

    wanted = list(dict.fromkeys(property_ids))
    selected: list[Property] = []
    for pid in wanted:
        prop = by_id.get(pid)
        if prop is None:
            warnings.append(
                ReportWarning(
                    code="UNKNOWN_PROPERTY_FILTER",
                    message=f"requested property {pid!r} is not in the supplied set",
                    context={"property_id": pid},
                )
            )
            logger.warning("unknown_property_filter", extra=log_context(property_id=pid))
            continue
        selected.append(prop)
    return selected
