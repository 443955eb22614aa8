"""
Pagination engine.
Pure functions computing the visible page window and navigation targets.
"""
import math
from typing import List, Optional, Sequence, TypeVar

from hot22_dashboard.models.page_window import PageWindow

T = TypeVar("T")

DEFAULT_MAX_WINDOW_SIZE = 5


def compute_window(
    total_items: int,
    page_size: int,
    current_page: int,
    max_window_size: int = DEFAULT_MAX_WINDOW_SIZE
) -> PageWindow:
    """
    Compute the page window around the current page.

    The current page stays centered except near the first and last pages,
    where the window is clamped to the boundary and keeps its full width.
    Out-of-range inputs are clamped; this never raises.

    Args:
        total_items: Total number of items across all pages
        page_size: Items per page
        current_page: 1-based page being displayed
        max_window_size: Maximum number of page numbers to show

    Returns:
        PageWindow
    """
    total_items = max(0, int(total_items))
    page_size = max(1, int(page_size))
    max_window_size = max(1, int(max_window_size))

    total_pages = math.ceil(total_items / page_size) if total_items else 0
    current_page = min(max(1, int(current_page)), max(total_pages, 1))

    start_index = (current_page - 1) * page_size
    end_index = min(start_index + page_size, total_items)

    return PageWindow(
        current_page=current_page,
        total_pages=total_pages,
        page_numbers=tuple(_page_numbers(current_page, total_pages, max_window_size)),
        start_index=start_index,
        end_index=end_index,
        has_next=current_page < total_pages,
        has_prev=current_page > 1,
        page_size=page_size,
        total_items=total_items
    )


def _page_numbers(current_page: int, total_pages: int, max_window_size: int) -> List[int]:
    if total_pages == 0:
        return []

    half = max_window_size // 2
    start = max(1, current_page - half)
    end = min(total_pages, start + max_window_size - 1)

    # Near the end: slide the window back instead of shrinking it
    if end - start + 1 < max_window_size:
        start = max(1, end - max_window_size + 1)

    return list(range(start, end + 1))


def go_to_page(window: PageWindow, page: int) -> Optional[int]:
    """Return the target page, or None when it lies outside 1..total_pages."""
    if page < 1 or page > window.total_pages:
        return None
    return page


def next_page(window: PageWindow) -> Optional[int]:
    return window.current_page + 1 if window.has_next else None


def previous_page(window: PageWindow) -> Optional[int]:
    return window.current_page - 1 if window.has_prev else None


def first_page(window: PageWindow) -> int:
    return 1


def last_page(window: PageWindow) -> int:
    return max(window.total_pages, 1)


def change_page_size(window: PageWindow, new_page_size: int) -> int:
    """
    Page to show after a page-size change.

    Keeps the first visible item on screen instead of jumping back to page 1.
    """
    new_page_size = max(1, int(new_page_size))
    return window.start_index // new_page_size + 1


def paginate_items(items: Sequence[T], window: PageWindow) -> List[T]:
    """Slice a fully loaded list down to the current page."""
    return list(items[window.start_index:window.end_index])


def pagination_text(window: PageWindow) -> str:
    if window.total_items == 0:
        return "No items to display"
    return f"Showing {window.start_index + 1}-{window.end_index} of {window.total_items} items"
