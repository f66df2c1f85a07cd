"""Fluent builder base class."""

from typing import Generic, TypeVar

T = TypeVar("T")


class FluentBuilder(Generic[T]):
    """
    Base class for builders whose setters return self.

    A builder can be built once; setters called afterwards raise.
    """

    def __init__(self) -> None:
        self._built = False

    def _check_not_built(self) -> None:
        """Raise an error if build() has already been called."""
        if self._built:
            raise RuntimeError("Builder has already been used to build an object")

    def _mark_built(self) -> None:
        self._built = True
