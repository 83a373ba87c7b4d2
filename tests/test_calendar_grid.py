import calendar
from datetime import date

import pytest

from nameday_reminders.calendar_grid import build_month, cell_event_type
from nameday_reminders.models import CalendarEvent, CellEventType, EventType


def _event(title: str, event_type: EventType, when: date, is_reminder: bool = True) -> CalendarEvent:
    return CalendarEvent(title=title, type=event_type, date=when, is_reminder=is_reminder)


@pytest.mark.parametrize("year, month", [(2024, 3), (2015, 2), (2024, 2), (2023, 12), (2026, 10)])
def test_grid_has_complete_rows(year: int, month: int) -> None:
    grid = build_month({}, year, month, date(2024, 1, 1))

    assert all(len(week) == 7 for week in grid)
    cells = [cell for week in grid for cell in week]
    assert len([cell for cell in cells if cell is not None]) == calendar.monthrange(year, month)[1]

    days = [cell for cell in cells if cell is not None]
    first = cells.index(days[0])
    last = cells.index(days[-1])
    assert all(cell is None for cell in cells[:first])
    assert all(cell is None for cell in cells[last + 1 :])
    assert all(cell is not None for cell in cells[first : last + 1])


def test_grid_starts_on_sunday() -> None:
    # March 1st 2024 was a Friday.
    grid = build_month({}, 2024, 3, date(2024, 3, 1))

    assert grid[0][:5] == [None] * 5
    assert grid[0][5].day_number == 1
    assert len(grid) == 6
    assert [cell.day_number for cell in grid[-1] if cell is not None] == [31]


def test_grid_without_padding() -> None:
    # February 2015 starts on a Sunday and has exactly four weeks.
    grid = build_month({}, 2015, 2, date(2015, 2, 1))

    assert len(grid) == 4
    assert grid[0][0].day_number == 1
    assert grid[-1][-1].day_number == 28


def test_today_is_flagged() -> None:
    grid = build_month({}, 2024, 3, date(2024, 3, 15))
    flagged = [cell.day_number for week in grid for cell in week if cell is not None and cell.is_today]

    assert flagged == [15]


def test_event_type_only_counts_personal_events() -> None:
    when = date(2024, 3, 25)
    events = {
        (3, 25): [_event("Irén", EventType.NAME_DAY, when, is_reminder=False)],
        (3, 26): [
            _event("Anna", EventType.BIRTHDAY, when),
            _event("Béla", EventType.NAME_DAY, when),
        ],
        (3, 27): [_event("Anna", EventType.BIRTHDAY, when), _event("Emma", EventType.NAME_DAY, when, False)],
    }

    grid = build_month(events, 2024, 3, date(2024, 3, 1))
    cells = {cell.day_number: cell for week in grid for cell in week if cell is not None}

    assert cells[25].event_type is CellEventType.NONE
    assert [event.title for event in cells[25].events] == ["Irén"]
    assert cells[26].event_type is CellEventType.BOTH
    assert cells[27].event_type is CellEventType.BIRTHDAY
    assert cells[1].event_type is CellEventType.NONE
    assert cells[1].events == []


def test_cell_event_type_name_day_only() -> None:
    events = [_event("Anna", EventType.NAME_DAY, date(2024, 7, 26))]
    assert cell_event_type(events) is CellEventType.NAME_DAY
