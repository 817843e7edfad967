"""
SQL oracle DTOs
"""
from typing import Optional
from pydantic import BaseModel, model_validator


class ValidationOutcome(BaseModel):
    """
    Oracle verdict on one SQL fragment

    text holds the canonical SQL of a successful format check
    """
    valid: bool
    diagnostic: Optional[str] = None
    text: Optional[str] = None

    @model_validator(mode="after")
    def _diagnostic_only_when_invalid(self) -> "ValidationOutcome":
        if self.valid and self.diagnostic is not None:
            raise ValueError("diagnostic must be empty for a valid outcome")
        if not self.valid and self.diagnostic is None:
            self.diagnostic = ""
        return self

    @classmethod
    def success(cls, text: Optional[str] = None) -> "ValidationOutcome":
        return cls(valid=True, text=text)

    @classmethod
    def failure(cls, diagnostic: str) -> "ValidationOutcome":
        return cls(valid=False, diagnostic=diagnostic)
