"""Runtime base classes imported by generated Python models.

These mirror the reserved ``concerto@1.0.0`` declarations so generated code
does not need the reserved namespace emitted next to it.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class Concept(BaseModel):
    """Root of every generated class."""

    model_config = ConfigDict(populate_by_name=True)

    class_: str | None = Field(default=None, alias="$class")


class Asset(Concept):
    identifier_: str = Field(alias="$identifier")


class Participant(Concept):
    identifier_: str = Field(alias="$identifier")


class Transaction(Concept):
    timestamp_: datetime.datetime = Field(alias="$timestamp")


class Event(Concept):
    timestamp_: datetime.datetime = Field(alias="$timestamp")


__all__ = ["Asset", "Concept", "Event", "Participant", "Transaction"]
