from pydantic import BaseModel


class CarMetrics(BaseModel):
    total: int
    available: int = 0
    sold: int = 0
    unavailable: int = 0
    featured: int = 0


class TestDriveMetrics(BaseModel):
    total: int
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
    no_show: int = 0
    conversion_rate: float = 0.0


class DashboardMetricsResponse(BaseModel):
    cars: CarMetrics
    test_drives: TestDriveMetrics


class DailySummaryResponse(BaseModel):
    date: str
    total_bookings: int
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
    no_show: int = 0
