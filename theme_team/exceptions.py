from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union


class ThemeTeamError(Exception):
    """Base class for errors raised by the recommender."""


class CatalogLoadError(ThemeTeamError):
    """A catalog, synonym or tag-override file is missing or malformed."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        self.path = str(path) if path is not None else None
        if self.path:
            message = f"{message}: {self.path}"
        super().__init__(message)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str


class QueryValidationError(ThemeTeamError):
    def __init__(self, issues: List[ValidationIssue]) -> None:
        self.issues = list(issues)
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in self.issues))
