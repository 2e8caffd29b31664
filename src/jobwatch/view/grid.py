"""Card grid column math and detail-card placement."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from jobwatch.view.navigation import ViewState

T = TypeVar("T")

DEFAULT_MIN_ITEM_WIDTH = 280
DEFAULT_GAP = 16
DEFAULT_CLOSE_DELAY_SECONDS = 0.3


@dataclass(frozen=True)
class GridCell(Generic[T]):
    """One rendered grid cell: a card, or the expanded detail card."""

    item: T
    index: int
    is_detail: bool = False


class GridPlacementEngine:
    """Compute grid columns and where an expanded detail card goes.

    The detail card is placed after the last item of the selected item's
    row so it spans below a full row and never splits one.
    """

    def __init__(
        self,
        *,
        min_item_width: int = DEFAULT_MIN_ITEM_WIDTH,
        gap: int = DEFAULT_GAP,
    ) -> None:
        """Create engine.

        Args:
            min_item_width: Minimum width of one card.
            gap: Gap between cards.

        Raises:
            ValueError: If sizes are not positive.
        """
        if min_item_width <= 0 or gap < 0:
            raise ValueError("min_item_width must be positive and gap non-negative.")
        self.min_item_width = min_item_width
        self.gap = gap

    def columns_for(self, container_width: float) -> int:
        """Return how many cards fit in one row.

        Args:
            container_width: Rendered container width.

        Returns:
            Column count, at least 1.
        """
        columns = int((container_width + self.gap) // (self.min_item_width + self.gap))
        return max(1, columns)

    def update_columns(self, state: ViewState, container_width: float) -> int:
        """Recompute and store column count after a resize.

        Args:
            state: View state to update.
            container_width: New container width.

        Returns:
            Stored column count.
        """
        state.columns = self.columns_for(container_width)
        return state.columns

    @staticmethod
    def insertion_index(selected_index: int, columns: int, length: int) -> int:
        """Return the index after which the detail card is rendered.

        Args:
            selected_index: Index of the selected item, or ``-1``.
            columns: Column count.
            length: Number of items in the grid.

        Returns:
            Last index of the selected item's row, or ``-1`` when nothing is
            selected.
        """
        if selected_index < 0 or selected_index >= length:
            return -1
        columns = max(1, columns)
        row = selected_index // columns
        return min((row + 1) * columns - 1, length - 1)

    def layout(
        self,
        items: Sequence[T],
        *,
        selected_index: int,
        columns: int,
    ) -> list[GridCell[T]]:
        """Return grid cells with the detail card placed after its row.

        Args:
            items: Ordered grid items.
            selected_index: Index of the expanded item, or ``-1``.
            columns: Column count.

        Returns:
            Ordered cells; the detail cell repeats the selected item.
        """
        insert_at = self.insertion_index(selected_index, columns, len(items))
        cells: list[GridCell[T]] = []
        for index, item in enumerate(items):
            cells.append(GridCell(item=item, index=index))
            if index == insert_at:
                cells.append(
                    GridCell(
                        item=items[selected_index], index=selected_index, is_detail=True
                    )
                )
        return cells


class DetailCardToggle:
    """Open/close behavior of the expanded detail card.

    Toggling the open item starts a fixed closing delay before the selection
    clears; toggling another item swaps immediately.
    """

    def __init__(
        self,
        state: ViewState,
        *,
        close_delay_seconds: float = DEFAULT_CLOSE_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create toggle bound to shared view state.

        Args:
            state: View state holding the selected execution id.
            close_delay_seconds: Closing animation duration.
            clock: Monotonic clock in seconds.
        """
        self._state = state
        self._close_delay = close_delay_seconds
        self._clock = clock
        self._closing_id: str | None = None
        self._closing_deadline = 0.0

    @property
    def selected_id(self) -> str | None:
        """Currently expanded item id after settling any finished close."""
        self._settle()
        return self._state.selected_execution_id

    @property
    def is_closing(self) -> bool:
        """Whether the expanded card is in its closing phase."""
        self._settle()
        return self._closing_id is not None

    def toggle(self, item_id: str) -> None:
        """Toggle one item's detail card.

        Args:
            item_id: Clicked item id.
        """
        self._settle()
        if self._state.selected_execution_id == item_id:
            if self._closing_id is None:
                self._closing_id = item_id
                self._closing_deadline = self._clock() + self._close_delay
            return
        self._closing_id = None
        self._state.selected_execution_id = item_id

    def close_now(self) -> None:
        """Clear the selection without a closing phase."""
        self._closing_id = None
        self._state.selected_execution_id = None

    def _settle(self) -> None:
        if self._closing_id is None:
            return
        if self._state.selected_execution_id != self._closing_id:
            self._closing_id = None
            return
        if self._clock() >= self._closing_deadline:
            self._state.selected_execution_id = None
            self._closing_id = None
