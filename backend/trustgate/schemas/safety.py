"""Pydantic schemas for the response safety filter API."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from trustgate.services.safety.types import (
    Blocked,
    FilterOutcome,
    GroundingIssue,
    Passed,
    Rephrased,
    SafetyViolation,
)


class FilterRequest(BaseModel):
    """Generated text to check before it is displayed."""

    text: str = Field(..., max_length=20000)


class ViolationSchema(BaseModel):
    category: str
    matched_text: str
    pattern_description: str
    offset: int

    @classmethod
    def from_violation(cls, violation: SafetyViolation) -> "ViolationSchema":
        return cls(
            category=violation.category.value,
            matched_text=violation.matched_text,
            pattern_description=violation.pattern_description,
            offset=violation.offset,
        )


class GroundingIssueSchema(BaseModel):
    type: str
    claimed: str
    cached: str | None = None
    description: str

    @classmethod
    def from_issue(cls, issue: GroundingIssue) -> "GroundingIssueSchema":
        return cls(
            type=issue.kind,
            claimed=issue.claimed,
            cached=issue.cached,
            description=issue.description,
        )


class _FilterResponseBase(BaseModel):
    text: str
    possibly_truncated: bool = False
    truncation_notice: str | None = None


class PassedResponse(_FilterResponseBase):
    outcome: Literal["passed"] = "passed"


class RephrasedResponse(_FilterResponseBase):
    outcome: Literal["rephrased"] = "rephrased"
    violations: list[ViolationSchema]
    grounding_issues: list[GroundingIssueSchema]


class BlockedResponse(_FilterResponseBase):
    outcome: Literal["blocked"] = "blocked"
    violations: list[ViolationSchema]
    grounding_issues: list[GroundingIssueSchema]


FilterResponse = Annotated[
    Union[PassedResponse, RephrasedResponse, BlockedResponse],
    Field(discriminator="outcome"),
]


def filter_outcome_to_schema(
    outcome: FilterOutcome,
    possibly_truncated: bool = False,
    truncation_notice: str | None = None,
) -> PassedResponse | RephrasedResponse | BlockedResponse:
    if isinstance(outcome, Passed):
        return PassedResponse(
            text=outcome.text,
            possibly_truncated=possibly_truncated,
            truncation_notice=truncation_notice,
        )
    if isinstance(outcome, (Rephrased, Blocked)):
        response_cls = RephrasedResponse if isinstance(outcome, Rephrased) else BlockedResponse
        return response_cls(
            text=outcome.text,
            possibly_truncated=possibly_truncated,
            truncation_notice=truncation_notice,
            violations=[ViolationSchema.from_violation(v) for v in outcome.violations],
            grounding_issues=[
                GroundingIssueSchema.from_issue(issue) for issue in outcome.grounding_issues
            ],
        )
    raise TypeError(f"Unknown filter outcome: {type(outcome).__name__}")
