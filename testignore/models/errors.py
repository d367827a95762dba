from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from result import Result

if TYPE_CHECKING:
    from testignore.services.index import ExclusionIndex


@dataclass(slots=True, frozen=True)
class ParseError:
    line_no: int
    line: str
    message: str

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.message}: {self.line!r}"


@dataclass(slots=True, frozen=True)
class IoError:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


type LoadError = ParseError | IoError

type LoadResult = Result[ExclusionIndex, LoadError]
