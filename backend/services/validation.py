from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str

    def under(self, prefix: str) -> "FieldError":
        path = f"{prefix}.{self.field}" if self.field else prefix
        return FieldError(field=path, code=self.code, message=self.message)


@dataclass(frozen=True)
class Validation(Generic[T]):
    """Either a validated value or the full list of field errors.

    Build with ``Validation.ok(value)`` / ``Validation.fail(error, ...)`` and
    join independent checks with ``collect`` so every violation is reported.
    """

    value: Optional[T]
    errors: Tuple[FieldError, ...] = ()

    @staticmethod
    def ok(value: T) -> "Validation[T]":
        return Validation(value=value)

    @staticmethod
    def fail(*errors: FieldError) -> "Validation[T]":
        return Validation(value=None, errors=tuple(errors))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def map(self, fn: Callable[[T], U]) -> "Validation[U]":
        if not self.is_valid:
            return Validation(value=None, errors=self.errors)
        return Validation.ok(fn(self.value))

    def bind(self, fn: Callable[[T], "Validation[U]"]) -> "Validation[U]":
        if not self.is_valid:
            return Validation(value=None, errors=self.errors)
        return fn(self.value)

    def under(self, prefix: str) -> "Validation[T]":
        if self.is_valid:
            return self
        return Validation(value=None, errors=tuple(e.under(prefix) for e in self.errors))


def collect(results: Iterable[Validation[T]]) -> Validation[List[T]]:
    values: List[T] = []
    errors: List[FieldError] = []
    for result in results:
        if result.is_valid:
            values.append(result.value)
        else:
            errors.extend(result.errors)
    if errors:
        return Validation.fail(*errors)
    return Validation.ok(values)
