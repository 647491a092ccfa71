"""
Errors raised by the quotation core.

Mutation API callers catch QuotationError subclasses; pydantic's
ValidationError never leaves the store unwrapped.
"""

from typing import Optional


class QuotationError(Exception):
    """Base class for every error the quotation core raises on purpose."""


class InvalidInputError(QuotationError, ValueError):
    """Rejected mutation input. `errors` lists the offending fields."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, exc, context: str = "input"):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        fields = ", ".join(e["field"] or "?" for e in errors)
        return cls(f"Invalid {context}: {fields}", errors)


class MaterialNotFoundError(QuotationError, KeyError):
    def __init__(self, material_id: str):
        super().__init__(material_id)
        self.material_id = material_id

    def __str__(self):
        return f"Material not found: {self.material_id}"


class ExportNotReadyError(QuotationError):
    """Company, client and at least one material are required to export."""


class ShareNotSupportedError(QuotationError):
    """Raised by a share hook when the platform cannot share files."""
