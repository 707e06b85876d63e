"""Base DTO for results handed out by the pipeline use cases."""

from pydantic import BaseModel, ConfigDict


class DTO(BaseModel):
    """
    Immutable pipeline result.

    Results are frozen so a caller cannot alter a reported transition, and
    unknown fields are rejected so a misspelled field fails at construction.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
