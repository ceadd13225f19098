from pydantic import BaseModel


class CountItem(BaseModel):
    name: str
    count: int


class ReportStats(BaseModel):
    total: int
    by_crime_type: list[CountItem]
    by_city: list[CountItem]
    by_month: list[CountItem]
    by_hour: list[CountItem]
