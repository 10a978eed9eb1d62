from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from datetime import date


NOT_AVAILABLE = "N/A"

# Average rating of a group, or "N/A" when no member of the group is rated
RatingValue = Union[float, str]


def _empty_distribution() -> Dict[int, int]:
    return {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


class OverviewStats(BaseModel):
    total_shows: int = 0
    total_spent: float = 0.0
    avg_rating: float = 0.0
    avg_cost: float = 0.0
    first_show: Optional[date] = None
    last_show: Optional[date] = None
    days_since_first: int = 0
    shows_per_month: float = 0.0
    shows_per_year: float = 0.0
    unique_venues: int = 0
    unique_shows: int = 0


class PriceRanges(BaseModel):
    under25: int = 0
    under50: int = 0
    under75: int = 0
    under100: int = 0
    over100: int = 0


class SpendingStats(BaseModel):
    total: float = 0.0
    average: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    monthly_spending: Dict[str, float] = Field(default_factory=dict)
    ranges: PriceRanges = Field(default_factory=PriceRanges)
    total_with_cost: int = 0


class RatingStats(BaseModel):
    average: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    distribution: Dict[int, int] = Field(default_factory=_empty_distribution)
    monthly_averages: Dict[str, float] = Field(default_factory=dict)
    total_rated: int = 0
    percentage_rated: float = 0.0


class VenueSummary(BaseModel):
    venue: str
    count: int = 0
    total_spent: float = 0.0
    avg_spent: float = 0.0
    avg_rating: RatingValue = NOT_AVAILABLE
    unique_shows: int = 0
    ratings: List[float] = Field(default_factory=list)


class VenueStats(BaseModel):
    venues: List[VenueSummary] = Field(default_factory=list)
    total_venues: int = 0
    most_frequent: Optional[VenueSummary] = None
    total_spent_at_venues: float = 0.0


class ShowSummary(BaseModel):
    show: str
    show_id: Optional[str] = None
    count: int = 0
    venues: int = 0
    avg_rating: RatingValue = NOT_AVAILABLE
    total_spent: float = 0.0
    avg_spent: float = 0.0
    date_range: int = 0
    is_repeat: bool = False


class ShowStats(BaseModel):
    shows: List[ShowSummary] = Field(default_factory=list)
    total_shows: int = 0
    repeat_shows: int = 0
    most_seen: Optional[ShowSummary] = None
    repeat_percentage: float = 0.0


class TrendBucket(BaseModel):
    count: int = 0
    spent: float = 0.0
    avg_rating: RatingValue = NOT_AVAILABLE


class TrendStats(BaseModel):
    monthly: Dict[str, TrendBucket] = Field(default_factory=dict)
    yearly: Dict[str, TrendBucket] = Field(default_factory=dict)
    peak_month: Optional[str] = None
    peak_year: Optional[str] = None


class YearStats(BaseModel):
    count: int = 0
    total_spent: float = 0.0
    avg_rating: float = 0.0
    avg_spent: float = 0.0


class YearOverYear(BaseModel):
    shows_change: str = "0"
    spending_change: str = "0"
    rating_change: str = "0"


class ComparisonStats(BaseModel):
    this_year: YearStats = Field(default_factory=YearStats)
    previous_year: YearStats = Field(default_factory=YearStats)
    year_over_year: YearOverYear = Field(default_factory=YearOverYear)


class PriceExtreme(BaseModel):
    performance_id: str
    ticket_price: float


class ExpenseStats(BaseModel):
    total_spent: float = 0.0
    total_tickets: float = 0.0
    total_booking_fees: float = 0.0
    total_travel: float = 0.0
    total_other: float = 0.0
    average_ticket_price: float = 0.0
    average_total_cost: float = 0.0
    highest_ticket: Optional[PriceExtreme] = None
    lowest_ticket: Optional[PriceExtreme] = None
    spending_by_year: Dict[str, float] = Field(default_factory=dict)
    spending_by_city: Dict[str, float] = Field(default_factory=dict)
    spending_by_genre: Dict[str, float] = Field(default_factory=dict)
    performances_with_costs: int = 0


class LiveSummary(BaseModel):
    count: int = 0
    average_rating: float = 0.0
    average_ticket_price: float = 0.0
    total_spent: float = 0.0


class ProShotSummary(BaseModel):
    count: int = 0
    average_rating: float = 0.0
    best_rating: float = 0.0
    this_year_count: int = 0


class ProductionMix(BaseModel):
    total: int = 0
    live: int = 0
    pro_shot: int = 0
    upcoming: int = 0
    live_summary: LiveSummary = Field(default_factory=LiveSummary)
    pro_shot_summary: ProShotSummary = Field(default_factory=ProShotSummary)


class Achievement(BaseModel):
    name: str
    description: str
    icon: str
    category: str


class Insight(BaseModel):
    type: str
    message: str
    icon: str


class StatisticsSnapshot(BaseModel):
    overview: OverviewStats = Field(default_factory=OverviewStats)
    spending: SpendingStats = Field(default_factory=SpendingStats)
    ratings: RatingStats = Field(default_factory=RatingStats)
    venues: VenueStats = Field(default_factory=VenueStats)
    shows: ShowStats = Field(default_factory=ShowStats)
    trends: TrendStats = Field(default_factory=TrendStats)
    comparisons: ComparisonStats = Field(default_factory=ComparisonStats)
    expenses: ExpenseStats = Field(default_factory=ExpenseStats)
    production_mix: ProductionMix = Field(default_factory=ProductionMix)
    achievements: List[Achievement] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)


class StatisticsSummary(BaseModel):
    total_shows: int = 0
    total_performances: int = 0
    past_performances: int = 0
    upcoming_performances: int = 0
    average_rating: float = 0.0
    cities_visited: int = 0
    production_types: List[str] = Field(default_factory=list)
    expense_stats: ExpenseStats = Field(default_factory=ExpenseStats)
