"""Unit tests for grid placement and detail card toggling."""

from __future__ import annotations

import pytest

from jobwatch.view.grid import DetailCardToggle, GridPlacementEngine
from jobwatch.view.navigation import ViewState


class _FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
@pytest.mark.parametrize(
    ("width", "expected"),
    [(900, 3), (280, 1), (100, 1), (576, 2), (575, 1), (0, 1)],
)
def test_columns_for_width(width: int, expected: int) -> None:
    """Column count should follow floor((w + gap) / (min + gap)), at least 1."""
    engine = GridPlacementEngine(min_item_width=280, gap=16)

    assert engine.columns_for(width) == expected


@pytest.mark.unit
def test_insertion_index_ends_selected_row() -> None:
    """Detail card should follow the last item of the selected row."""
    assert GridPlacementEngine.insertion_index(4, 3, 10) == 5
    assert GridPlacementEngine.insertion_index(9, 3, 10) == 9
    assert GridPlacementEngine.insertion_index(0, 1, 10) == 0
    assert GridPlacementEngine.insertion_index(-1, 3, 10) == -1


@pytest.mark.unit
def test_layout_inserts_detail_after_row() -> None:
    """Layout should repeat the selected item as a detail cell after its row."""
    engine = GridPlacementEngine()
    items = [f"e{index}" for index in range(10)]

    cells = engine.layout(items, selected_index=4, columns=3)

    assert [cell.item for cell in cells[:7]] == ["e0", "e1", "e2", "e3", "e4", "e5", "e4"]
    assert cells[6].is_detail is True
    assert sum(cell.is_detail for cell in cells) == 1
    assert len(cells) == 11


@pytest.mark.unit
def test_update_columns_writes_state() -> None:
    state = ViewState()

    GridPlacementEngine().update_columns(state, 900)

    assert state.columns == 3


@pytest.mark.unit
def test_invalid_geometry_raises() -> None:
    with pytest.raises(ValueError):
        GridPlacementEngine(min_item_width=0)


@pytest.mark.unit
def test_toggle_same_item_closes_after_delay() -> None:
    """Re-toggling the open item should clear it only after the delay."""
    # Arrange - open item A
    clock = _FakeClock()
    state = ViewState()
    toggle = DetailCardToggle(state, close_delay_seconds=0.3, clock=clock)
    toggle.toggle("A")

    # Act - toggle A again and advance time
    toggle.toggle("A")
    closing_before = toggle.is_closing
    selected_before = toggle.selected_id
    clock.now += 0.31

    # Assert - closed after delay
    assert closing_before is True
    assert selected_before == "A"
    assert toggle.selected_id is None
    assert toggle.is_closing is False
    assert state.selected_execution_id is None


@pytest.mark.unit
def test_toggle_other_item_swaps_immediately() -> None:
    """Toggling another item, even while closing, should switch at once."""
    clock = _FakeClock()
    state = ViewState()
    toggle = DetailCardToggle(state, close_delay_seconds=0.3, clock=clock)
    toggle.toggle("A")
    toggle.toggle("A")

    toggle.toggle("B")
    clock.now += 1.0

    assert toggle.selected_id == "B"
    assert toggle.is_closing is False


@pytest.mark.unit
def test_close_now_clears_selection() -> None:
    state = ViewState(selected_execution_id="A")
    toggle = DetailCardToggle(state)

    toggle.close_now()

    assert toggle.selected_id is None
