from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date
from enum import Enum


class SortField(str, Enum):
    DATE = "date"
    RATING = "rating"
    TITLE = "title"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PerformanceFilters(BaseModel):
    search: Optional[str] = None
    city: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort: Optional[str] = None

    @field_validator("sort")
    @classmethod
    def _check_sort(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        field, _, direction = value.partition("-")
        SortField(field)
        SortDirection(direction or SortDirection.ASC.value)
        return value

    @property
    def sort_field(self) -> Optional[SortField]:
        if not self.sort:
            return None
        return SortField(self.sort.partition("-")[0])

    @property
    def sort_descending(self) -> bool:
        return bool(self.sort) and self.sort.partition("-")[2] == SortDirection.DESC.value

    def cache_key(self) -> str:
        return self.model_dump_json(exclude_none=True)
