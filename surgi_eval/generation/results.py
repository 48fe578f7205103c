"""SurgiEval — Явний результат зовнішнього виклику"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class GenerationResult(Generic[T]):
    """
    Ok(value) | Err(error).

    Машина станів споживає результат як подію, замість винятку,
    що перетинає межу UI.
    """
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "GenerationResult[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: str) -> "GenerationResult[T]":
        return cls(error=error or "unknown error")

    @property
    def is_ok(self) -> bool:
        return self.error is None
