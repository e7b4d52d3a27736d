"""
Custom exceptions for campaign-fields.

The formula engine raises these internally; its public functions convert
them into returned values so a rendering pass over many entities never
aborts on one bad formula.
"""

from typing import Any


class CampaignFieldsException(Exception):
    """
    Base exception for all campaign-fields errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Formula Errors
# =============================================================================


class FormulaError(CampaignFieldsException):
    """A formula could not be processed."""


class FormulaSyntaxError(FormulaError):
    """Formula text does not match the formula grammar."""

    def __init__(self, detail: str, formula: str, position: int | None = None) -> None:
        super().__init__(
            message=detail,
            code="FORMULA_SYNTAX_ERROR",
            details={
                "formula": formula[:200],
                "position": position,
            },
        )
        self.detail = detail
        self.position = position


class FormulaEvaluationError(FormulaError):
    """A well-formed formula could not be reduced to a value."""

    def __init__(self, detail: str, operator: str | None = None) -> None:
        super().__init__(
            message=detail,
            code="FORMULA_EVALUATION_ERROR",
            details={"operator": operator} if operator else None,
        )
        self.detail = detail


# =============================================================================
# Field Configuration Errors
# =============================================================================


class InvalidFormulaError(CampaignFieldsException):
    """Computed field configuration failed validation."""

    def __init__(self, kind: str, detail: str, field_name: str | None = None) -> None:
        super().__init__(
            message=f"Invalid formula: {detail}",
            code="INVALID_FORMULA",
            details={
                "kind": kind,
                "field_name": field_name,
            },
        )
        self.kind = kind
