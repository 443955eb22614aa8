"""
PageWindow domain model.
Result of a pagination computation: visible page numbers, item range and navigation flags.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PageWindow:
    """Visible window of page numbers around the current page."""

    current_page: int
    total_pages: int
    page_numbers: Tuple[int, ...]
    start_index: int
    end_index: int
    has_next: bool
    has_prev: bool
    page_size: int
    total_items: int

    @property
    def is_first_page(self) -> bool:
        return self.current_page == 1

    @property
    def is_last_page(self) -> bool:
        return self.current_page == self.total_pages

    @property
    def items_on_current_page(self) -> int:
        return max(0, self.end_index - self.start_index)
