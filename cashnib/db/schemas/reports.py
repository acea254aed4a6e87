import datetime as dt
from typing import List
from pydantic import BaseModel


class CategoryAmount(BaseModel):
    category: str
    amount: float
    percentage: float


class FinancialSummary(BaseModel):
    start_date: dt.date
    end_date: dt.date
    total_income: float
    total_expenses: float
    net_income: float
    top_categories: List[CategoryAmount]


class MonthlyTrendPoint(BaseModel):
    month: str
    amount: float


class SpendingAnalysis(BaseModel):
    start_date: dt.date
    end_date: dt.date
    category_breakdown: List[CategoryAmount]
    monthly_trends: List[MonthlyTrendPoint]
    average_daily: float
    average_monthly: float
