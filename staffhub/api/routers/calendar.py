from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from staffhub.api.deps import get_access_context
from staffhub.core.holidays import check_span, count_working_days, get_jurisdiction, list_holidays
from staffhub.models.calendar import HolidayCalendarResponse, HolidayEntry, WorkingDaysResponse
from staffhub.services.access_service import AccessContext


router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/holidays/{year}", response_model=HolidayCalendarResponse)
def read_holidays(
    year: int,
    jurisdiction: Optional[str] = None,
    context: AccessContext = Depends(get_access_context),
) -> HolidayCalendarResponse:
    _ = context
    calendar = get_jurisdiction(jurisdiction)
    return HolidayCalendarResponse(
        year=year,
        jurisdiction=calendar.code,
        holidays=[
            HolidayEntry(day=h.day, name=h.name, movable=h.movable)
            for h in list_holidays(year, calendar.code)
        ],
    )


@router.get("/working-days", response_model=WorkingDaysResponse)
def read_working_days(
    start: date,
    end: date,
    jurisdiction: Optional[str] = None,
    context: AccessContext = Depends(get_access_context),
) -> WorkingDaysResponse:
    _ = context
    check_span(start, end)
    calendar = get_jurisdiction(jurisdiction)
    return WorkingDaysResponse(
        start=start,
        end=end,
        jurisdiction=calendar.code,
        working_days=count_working_days(start, end, calendar.code),
    )
