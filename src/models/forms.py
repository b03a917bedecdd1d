"""
Form Validation Models

Forms report problems field by field so the page can show each
message next to the input it belongs to.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Errors block submission, warnings don't"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form.

    When there are no errors, ``cleaned`` holds the domain model built
    from the form, ready to hand to a service.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    cleaned: Optional[Any] = None

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, issue.message)
        return errors
