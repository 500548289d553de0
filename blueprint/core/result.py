"""Two-valued result type used across the generation pipeline.

Every fallible pipeline operation returns either a :class:`Success` holding
its value or a :class:`Failure` holding its error, so error states are
visible in signatures instead of being raised across stage boundaries.

Usage::

    def load_user(user_id: str) -> Result[User, ConfigurationError]:
        if not user_id:
            return Failure(ConfigurationError("Empty ID"))
        return Success(User(user_id))

    load_user("abc").when(
        success=lambda user: print(user.name),
        failure=lambda error: print(error.message),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
R = TypeVar("R")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful result containing ``value``."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    @property
    def value_or_none(self) -> T:
        return self.value

    @property
    def error_or_none(self) -> None:
        return None

    def unwrap(self) -> T:
        """Return the success value."""
        return self.value

    def when(
        self,
        *,
        success: Callable[[T], R],
        failure: Callable[[object], R],
    ) -> R:
        return success(self.value)

    def map(self, transform: Callable[[T], R]) -> Success[R]:
        return Success(transform(self.value))

    def map_error(self, transform: Callable[[object], object]) -> Success[T]:
        return self

    def flat_map(self, transform: Callable[[T], Result[R, E]]) -> Result[R, E]:
        return transform(self.value)

    def get_or_else(self, or_else: Callable[[object], T]) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed result containing ``error``."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    @property
    def value_or_none(self) -> None:
        return None

    @property
    def error_or_none(self) -> E:
        return self.error

    def unwrap(self) -> NoReturn:
        """Raise the contained error.

        Errors that are not exceptions are wrapped in ``RuntimeError``.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise RuntimeError(str(self.error))

    def when(
        self,
        *,
        success: Callable[[object], R],
        failure: Callable[[E], R],
    ) -> R:
        return failure(self.error)

    def map(self, transform: Callable[[object], object]) -> Failure[E]:
        return self

    def map_error(self, transform: Callable[[E], R]) -> Failure[R]:
        return Failure(transform(self.error))

    def flat_map(self, transform: Callable[[object], object]) -> Failure[E]:
        return self

    def get_or_else(self, or_else: Callable[[E], T]) -> T:
        return or_else(self.error)


Result = Union[Success[T], Failure[E]]
