from datetime import date

from nameday_reminders.models import GROUP_ORDER, Contact, GroupName, NameDayEntry
from nameday_reminders.reminder_grouper import group_name_for, rank_contacts


def _birthday(contact_id: int, name: str, when: date) -> Contact:
    return Contact(id=contact_id, first_name=name, birthday=when)


def _name_day(contact_id: int, name: str, when: date) -> Contact:
    return Contact(id=contact_id, first_name=name, name_days=(NameDayEntry(date=when),))


def test_end_to_end_grouping() -> None:
    contacts = [
        _birthday(1, "A", date(2023, 1, 1)),
        _name_day(2, "B", date(2023, 1, 5)),
        Contact(id=3, first_name="C"),
    ]

    groups = rank_contacts(contacts, date(2024, 1, 1))

    assert [(group.name, [r.contact.first_name for r in group.reminders]) for group in groups] == [
        (GroupName.TODAY, ["A"]),
        (GroupName.THIS_WEEK, ["B"]),
        (GroupName.NO_UPCOMING_EVENTS, ["C"]),
    ]


def test_every_bucket_boundary() -> None:
    # 2024-01-10 is a Wednesday; the week ends Saturday 2024-01-13.
    today = date(2024, 1, 10)
    contacts = [
        Contact(id=7, first_name="G"),
        _birthday(6, "F", date(1990, 1, 5)),
        _birthday(5, "E", date(1990, 2, 20)),
        _birthday(4, "D", date(1990, 1, 25)),
        _name_day(3, "C", date(2023, 1, 18)),
        _name_day(2, "B", date(2023, 1, 13)),
        _birthday(1, "A", date(1990, 1, 10)),
    ]

    groups = rank_contacts(contacts, today)

    assert [(group.name, [r.contact.first_name for r in group.reminders]) for group in groups] == [
        (GroupName.TODAY, ["A"]),
        (GroupName.THIS_WEEK, ["B"]),
        (GroupName.NEXT_WEEK, ["C"]),
        (GroupName.THIS_MONTH, ["D"]),
        (GroupName.NEXT_MONTH, ["E"]),
        (GroupName.LATER, ["F"]),
        (GroupName.NO_UPCOMING_EVENTS, ["G"]),
    ]
    assert groups[-2].reminders[0].next_occurrence == date(2025, 1, 5)


def test_week_boundary_on_saturday_and_sunday() -> None:
    saturday = date(2024, 1, 13)
    assert group_name_for(date(2024, 1, 14), saturday) is GroupName.NEXT_WEEK

    sunday = date(2024, 1, 14)
    assert group_name_for(date(2024, 1, 20), sunday) is GroupName.THIS_WEEK
    assert group_name_for(date(2024, 1, 21), sunday) is GroupName.NEXT_WEEK


def test_next_month_wraps_into_january() -> None:
    assert group_name_for(date(2025, 1, 15), date(2024, 12, 10)) is GroupName.NEXT_MONTH
    assert group_name_for(date(2025, 2, 1), date(2024, 12, 10)) is GroupName.LATER


def test_groups_sorted_ascending_and_stable() -> None:
    today = date(2024, 3, 1)
    contacts = [
        _birthday(1, "Late", date(1990, 3, 30)),
        Contact(id=2, first_name="Empty1"),
        _birthday(3, "Early", date(1990, 3, 20)),
        Contact(id=4, first_name="Empty2"),
        _birthday(5, "AlsoEarly", date(1980, 3, 20)),
    ]

    groups = rank_contacts(contacts, today)
    flattened = [r.contact.first_name for group in groups for r in group.reminders]

    assert flattened == ["Early", "AlsoEarly", "Late", "Empty1", "Empty2"]


def test_grouping_is_a_partition_in_canonical_order() -> None:
    today = date(2024, 5, 15)
    contacts = [_birthday(index, f"P{index}", date(1990, (index % 12) + 1, 10)) for index in range(1, 25)]
    contacts.append(Contact(id=99, first_name="Nobody"))

    groups = rank_contacts(contacts, today)
    seen = [r.contact.id for group in groups for r in group.reminders]

    assert sorted(seen) == sorted(contact.id for contact in contacts)
    names = [group.name for group in groups]
    assert names == [name for name in GROUP_ORDER if name in names]


def test_rank_contacts_empty_input() -> None:
    assert rank_contacts([], date(2024, 1, 1)) == []
