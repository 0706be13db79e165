from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseOpfModel(BaseModel):
    """Base class for values read out of a package document, which never change once built."""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )


class BaseMutableOpfModel(BaseModel):
    """Base class for records that are filled in progressively while parsing."""

    model_config = ConfigDict(
        frozen=False,
        # The record is built up one field at a time by independent
        # procedures, so every assignment is validated, not just construction.
        validate_assignment=True,
    )
