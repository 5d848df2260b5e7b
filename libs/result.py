"""Result type for use case outcomes

Use cases return ``Result[T]`` instead of raising, so the API layer can map
failures to HTTP responses without knowing about domain exceptions.
"""

from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class Error(BaseModel):
    """Machine-readable failure description"""

    code: str
    message: str
    reason: Optional[str] = None
    category: str = "internal"
    details: Dict[str, Any] = Field(default_factory=dict)


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Ok({self.value!r})"
        return f"Err({self.error.code})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
