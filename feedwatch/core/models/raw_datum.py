"""
RawDatum and DataLineage models for records flowing through the monitor.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class DataLineage(BaseModel):
    """
    Provenance trail attached to a datum as it passes through stages.

    Attributes:
        source: Source the datum came from
        received_at: When the lineage block was created (ISO-8601)
        original_id: Identifier of the datum as received, if any
        transformations: Ordered notes of applied transformations (append-only)
    """

    source: str
    received_at: str
    original_id: str | None = None
    transformations: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "source": "binance",
                "received_at": "2025-11-17T08:30:00.125Z",
                "original_id": "tick-0001",
                "transformations": ["ingested", "correction:type_cast_price"]
            }
        }


class RawDatum(BaseModel):
    """
    One ingested record.

    The payload is opaque; its shape depends on the feed type (see
    ``PayloadKind``). Instances are treated as values: corrections and
    lineage updates produce new instances.

    Attributes:
        id: Optional producer-assigned identifier
        source: Source name
        timestamp: The datum's own ISO-8601 timestamp
        payload: Feed-specific content
        lineage: Provenance trail, once attached
        received_at: Set by the store when the datum is pushed
    """

    id: str | None = None
    source: str = ""
    timestamp: str = ""
    payload: Any = None
    lineage: DataLineage | None = None
    received_at: str | None = None

    @field_validator("source", "timestamp", mode="before")
    @classmethod
    def missing_as_empty(cls, v):
        """Treat null source or timestamp as empty so validation can report it."""
        return "" if v is None else v

    def evolve(self, **changes: Any) -> "RawDatum":
        """
        Return a copy with ``changes`` applied; the payload is deep-copied.
        """
        return self.model_copy(update=changes, deep=True)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "tick-0001",
                "source": "binance",
                "timestamp": "2025-11-17T08:30:00.000Z",
                "payload": {"symbol": "BTCUSDT", "price": 64012.5}
            }
        }
