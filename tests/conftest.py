import os

import pytest

# Keep the suite away from any configured database
os.environ["PERSIST_RECORDS"] = "false"

import config  # noqa: E402
from tests.helpers import build_workbook  # noqa: E402


@pytest.fixture(autouse=True)
def no_persistence(monkeypatch):
    monkeypatch.setattr(config, "PERSIST_RECORDS", False)


@pytest.fixture
def make_xlsx():
    return build_workbook


@pytest.fixture
def sample_xlsx():
    return build_workbook([
        ("Jane Roe", "2024-12-04", "09:00", "17:30"),  # Wednesday
        (None, "2024-12-03", "09:00", None),           # Tuesday, no check-out
        (None, "2024-12-07", "10.00", "12.00"),        # Saturday
        (None, "2024-12-08", "09:00", "13:00"),        # Sunday
    ])
