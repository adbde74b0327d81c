"""Three-state result vocabulary shared by the store and the view model.

``Resource`` is a closed union; consumers handle it with ``match``::

    match resource:
        case Loading():
            ...
        case Success(data=items):
            ...
        case Error(message=message):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Loading:
    pass


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    data: T


@dataclass(frozen=True, slots=True)
class Error:
    message: str


Resource = Union[Loading, Success[T], Error]
