"""Validation outcomes returned by aggregates and eligibility checks."""

from __future__ import annotations

from pydantic import BaseModel


class Result(BaseModel):
    is_success: bool
    error: str = ""

    @classmethod
    def success(cls) -> "Result":
        return cls(is_success=True)

    @classmethod
    def failure(cls, error: str) -> "Result":
        return cls(is_success=False, error=error)

    @property
    def is_failure(self) -> bool:
        return not self.is_success


class ClaimResult(BaseModel):
    errors: list[str] = []

    @property
    def success(self) -> bool:
        return not self.errors

    def describe(self) -> str:
        return " AND ".join(self.errors)
