from __future__ import annotations

import json
import time
from pathlib import Path

import pytest

from nameday_reminders.name_day_catalog import NameDayCatalog

CATALOG_DATA = {
    "January": {
        "1": {"Hungary": ["Fruzsina", "Aglája"]},
        "5": {"Hungary": ["Simon", "Ede"]},
    },
    "February": {
        "29": {"Hungary": ["Elemér"]},
        "30": {"Hungary": ["Nobody"]},
    },
    "March": {
        "25": {"Hungary": ["Irén", "Írisz", "Eva"], "Slovakia": ["Marián"]},
    },
    "June": {
        "2": {"Hungary": ["Kármen", "Anita", "Irén"]},
    },
    "Smarch": {
        "1": {"Hungary": ["Ghost"]},
    },
}


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    path = tmp_path / "namedays.json"
    path.write_text(json.dumps(CATALOG_DATA, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def catalog(catalog_path: Path) -> NameDayCatalog:
    return NameDayCatalog(catalog_path, year=2023)


def _use_local_timezone(zone: str):
    with pytest.MonkeyPatch.context() as patch:
        patch.setenv("TZ", zone)
        time.tzset()
        yield
    time.tzset()


@pytest.fixture
def utc_local_time():
    yield from _use_local_timezone("UTC0")


@pytest.fixture
def budapest_local_time():
    # POSIX rule, so no tz database is needed.
    yield from _use_local_timezone("CET-1CEST,M3.5.0,M10.5.0/3")
