"""
ValidationResult model representing the outcome of validating a datum (ephemeral).
"""

from pydantic import BaseModel, model_validator


class ValidationResult(BaseModel):
    """
    Outcome of validating a datum (ephemeral, never persisted).

    Attributes:
        ok: True iff no error was detected
        errors: Error messages in detection order, or None when there are none
    """

    ok: bool
    errors: list[str] | None = None

    @model_validator(mode="after")
    def check_ok_consistency(self) -> "ValidationResult":
        """Validate that ok=True implies there are no errors."""
        if self.ok and self.errors:
            raise ValueError("ok=True but errors is not empty")
        return self

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(ok=not errors, errors=list(errors) if errors else None)

    class Config:
        json_schema_extra = {
            "example": {
                "ok": False,
                "errors": ["price must be number", "price feed missing symbol"]
            }
        }
