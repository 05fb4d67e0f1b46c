from datetime import date

import pytest

from src.hr_portal.hr_portal.core.exceptions import NotFoundError, ValidationError
from src.hr_portal.hr_portal.holidays.model import Holiday
from tests.fakes import make_container


@pytest.fixture
def service():
    return make_container(
        holidays=[
            Holiday(1, "New Year", date(2026, 1, 1)),
            Holiday(2, "Spring Festival", date(2026, 3, 20), is_optional=True),
            Holiday(3, "Christmas", date(2026, 12, 25)),
        ]
    ).holiday_service


def test_list_by_year_and_month(service):
    assert [h.name for h in service.list_holidays(year=2026)] == ["New Year", "Spring Festival", "Christmas"]
    assert [h.holiday_id for h in service.list_holidays(year=2026, month=3)] == [2]
    assert service.list_holidays(year=2025) == []


def test_invalid_month(service):
    with pytest.raises(ValidationError):
        service.list_holidays(year=2026, month=13)


def test_create_rejects_same_date(service):
    holiday_id = service.create(name=" Founders Day ", holiday_date=date(2026, 6, 1), description="  ")

    assert service.is_holiday(date(2026, 6, 1))
    created = service.list_holidays(year=2026, month=6)[0]
    assert created.holiday_id == holiday_id
    assert created.name == "Founders Day"
    assert created.description is None

    with pytest.raises(ValidationError, match="already exists"):
        service.create(name="Other", holiday_date=date(2026, 6, 1))


def test_delete(service):
    service.delete(1)

    assert not service.is_holiday(date(2026, 1, 1))
    with pytest.raises(NotFoundError, match="Holiday not found"):
        service.delete(1)
