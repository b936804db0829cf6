"""
Data lineage tracking for datums.

This module provides a LineageTracker that attaches a provenance block to
each datum and extends its list of transformations as the datum moves
through the pipeline stages.
"""

from feedwatch.core.models import DataLineage, RawDatum
from feedwatch.observability.logger import get_logger
from feedwatch.utils.timeutils import Clock, now_iso, utc_now

logger = get_logger(__name__)


class LineageTracker:
    """
    Attaches and extends lineage on datums without mutating its arguments.

    Usage:
        tracker = LineageTracker()
        datum = tracker.attach(datum, "ingested")
        datum = tracker.add_transform(datum, "correction:type_cast_price")
        datum.lineage.transformations  # ["ingested", "correction:type_cast_price"]
    """

    def __init__(self, clock: Clock = utc_now):
        """
        Initialize lineage tracker.

        Args:
            clock: Time source for ``received_at`` stamps
        """
        self.clock = clock

    def attach(self, datum: RawDatum, transformation: str | None = None) -> RawDatum:
        """
        Create a fresh lineage block for a datum.

        Args:
            datum: Datum to stamp
            transformation: Optional first transformation note

        Returns:
            A new datum carrying the lineage block
        """
        lineage = DataLineage(
            source=datum.source,
            received_at=now_iso(self.clock),
            original_id=datum.id,
            transformations=[transformation] if transformation else [],
        )
        return datum.evolve(lineage=lineage)

    def add_transform(self, datum: RawDatum, transformation: str) -> RawDatum:
        """
        Append a transformation note, creating the lineage block if needed.

        Existing entries are kept in order; nothing is ever removed.

        Args:
            datum: Datum to extend
            transformation: Description of the applied transformation

        Returns:
            A new datum with the extended lineage
        """
        if datum.lineage is None:
            lineage = DataLineage(
                source=datum.source,
                received_at=now_iso(self.clock),
                transformations=[transformation],
            )
        else:
            lineage = datum.lineage.model_copy(
                update={"transformations": [*datum.lineage.transformations, transformation]}
            )

        logger.debug(
            f"Tracked transformation '{transformation}' for datum {datum.id or '<no id>'}",
            extra={"source": datum.source, "transformation": transformation},
        )
        return datum.evolve(lineage=lineage)
