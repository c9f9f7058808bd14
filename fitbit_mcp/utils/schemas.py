"""Parameter descriptors for tool registration.

Each descriptor renders an `Annotated` type via `annotation()`. FastMCP turns
those annotations into the tool's JSON input schema and validates incoming
arguments with pydantic before the handler runs, so handlers only ever see
well-formed values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional

from pydantic import Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@dataclass(frozen=True)
class ParamSchema:
    description: str
    required: bool = True

    def base_annotation(self) -> Any:
        raise NotImplementedError

    def field(self) -> Any:
        return Field(description=self.description)

    def annotation(self) -> Any:
        annotated = Annotated[self.base_annotation(), self.field()]
        return annotated if self.required else Optional[annotated]


@dataclass(frozen=True)
class StringPattern(ParamSchema):
    pattern: str = ".*"

    def base_annotation(self) -> Any:
        return str

    def field(self) -> Any:
        return Field(pattern=self.pattern, description=self.description)


@dataclass(frozen=True)
class EnumChoice(ParamSchema):
    choices: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.choices:
            raise ValueError("EnumChoice needs at least one choice")

    def base_annotation(self) -> Any:
        return Literal[self.choices]


@dataclass(frozen=True)
class DateRangeBound(StringPattern):
    """One end ("start" or "end") of an inclusive YYYY-MM-DD range."""

    pattern: str = DATE_PATTERN
    bound: str = "start"

    def __post_init__(self) -> None:
        if self.bound not in ("start", "end"):
            raise ValueError(f"bound must be 'start' or 'end', got {self.bound!r}")


@dataclass(frozen=True)
class IntegerRange(ParamSchema):
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def base_annotation(self) -> Any:
        return int

    def field(self) -> Any:
        return Field(ge=self.minimum, le=self.maximum, description=self.description)


class CommonSchemas:
    """Descriptors shared by several tool modules."""

    date = StringPattern(
        description="The date in YYYY-MM-DD format or 'today'.",
        pattern=r"^(\d{4}-\d{2}-\d{2}|today)$",
    )
    start_date = DateRangeBound(
        description="The start date for the range in YYYY-MM-DD format.",
        bound="start",
    )
    end_date = DateRangeBound(
        description="The end date for the range in YYYY-MM-DD format.",
        bound="end",
    )
    before_date = StringPattern(
        description="Only return entries logged before this date (YYYY-MM-DD). Defaults to today.",
        pattern=DATE_PATTERN,
        required=False,
    )
    limit = IntegerRange(
        description="Maximum number of entries to return (1-100). Defaults to 20.",
        minimum=1,
        maximum=100,
        required=False,
    )
