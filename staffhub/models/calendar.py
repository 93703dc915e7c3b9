from datetime import date

from pydantic import BaseModel


class HolidayEntry(BaseModel):
    day: date
    name: str
    movable: bool


class HolidayCalendarResponse(BaseModel):
    year: int
    jurisdiction: str
    holidays: list[HolidayEntry]


class WorkingDaysResponse(BaseModel):
    start: date
    end: date
    jurisdiction: str
    working_days: int
