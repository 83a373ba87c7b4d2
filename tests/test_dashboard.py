from datetime import date

from nameday_reminders.dashboard import build_dashboard
from nameday_reminders.models import Contact, EventType, NameDayEntry
from nameday_reminders.name_day_catalog import NameDayCatalog


def test_dashboard_splits_today_and_next_week(catalog: NameDayCatalog) -> None:
    contacts = [
        Contact(id=1, first_name="Fruzsina", last_name="Nagy", birthday=date(1990, 1, 1)),
        Contact(id=2, first_name="Simon", name_days=(NameDayEntry(date=date(2023, 1, 5)),)),
        Contact(id=3, first_name="Ede", birthday=date(1980, 1, 3)),
        Contact(id=4, first_name="Far", birthday=date(1980, 1, 9)),
    ]

    dashboard = build_dashboard(contacts, catalog.flatten(), date(2024, 1, 1))

    assert [(event.title, event.type) for event in dashboard.todays_events] == [
        ("Fruzsina Nagy", EventType.BIRTHDAY)
    ]
    assert [(event.title, event.date) for event in dashboard.upcoming_events] == [
        ("Ede", date(2024, 1, 3)),
        ("Simon", date(2024, 1, 5)),
    ]
    assert dashboard.todays_name_days == ["Fruzsina", "Aglája"]


def test_dashboard_includes_window_edge() -> None:
    contacts = [Contact(id=1, first_name="Edge", birthday=date(1980, 1, 8))]

    dashboard = build_dashboard(contacts, [], date(2024, 1, 1))

    assert [event.date for event in dashboard.upcoming_events] == [date(2024, 1, 8)]


def test_dashboard_filters_name_days_by_tradition(catalog: NameDayCatalog) -> None:
    dashboard = build_dashboard([], catalog.flatten(), date(2024, 3, 25), tradition="Slovakia")

    assert dashboard.todays_name_days == ["Marián"]
    assert dashboard.todays_events == []
