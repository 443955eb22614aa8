"""
Query domain model.
Immutable description of one list request: page, page size, sort and filters.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

Scalar = Union[str, int, float, bool, None]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


SEARCH_KEY = "search"


def is_empty_value(value: Any) -> bool:
    """Empty strings and None count as an absent filter."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


@dataclass(frozen=True)
class Query:
    """Domain model for a paginated, sorted and filtered list query."""

    page: int = 1
    page_size: int = 50
    sort_key: str = ""
    sort_direction: SortDirection = SortDirection.DESC
    filters: Tuple[Tuple[str, Scalar], ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got: {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be > 0, got: {self.page_size}")
        # Filters are kept sorted so equality does not depend on insertion order
        object.__setattr__(self, "filters", tuple(sorted(dict(self.filters).items())))
        object.__setattr__(self, "sort_direction", SortDirection(self.sort_direction))

    @classmethod
    def create(cls, filters: Dict[str, Scalar] = None, **kwargs) -> "Query":
        return cls(filters=tuple((filters or {}).items()), **kwargs)

    @property
    def filter_map(self) -> Dict[str, Scalar]:
        return dict(self.filters)

    @property
    def search(self) -> str:
        return str(self.filter_map.get(SEARCH_KEY) or "")

    def to_params(self) -> Dict[str, Any]:
        """Render the query as backend query-string parameters."""
        params: Dict[str, Any] = {"page": self.page, "limit": self.page_size}
        if self.sort_key:
            params["sortBy"] = self.sort_key
            params["sortOrder"] = self.sort_direction.value
        for key, value in self.filters:
            if not is_empty_value(value):
                params[key] = value
        return params
