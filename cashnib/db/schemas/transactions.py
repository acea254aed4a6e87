import uuid
import datetime as dt
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination, PartialUpdate

TransactionType = Literal['income', 'expense', 'transfer']


class Location(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None


class Receipt(BaseModel):
    url: Optional[str] = None
    filename: Optional[str] = None


class TransactionBase(BaseModel):
    amount: float = Field(gt=0)
    category: str = Field(min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    date: dt.date
    type: TransactionType = 'expense'
    account_id: Optional[str] = None
    tags: Optional[List[str]] = None
    location: Optional[Location] = None
    receipt: Optional[Receipt] = None


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(PartialUpdate):
    required_fields = ("amount", "category", "date", "type")

    amount: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    account_id: Optional[str] = None
    tags: Optional[List[str]] = None
    location: Optional[Location] = None
    receipt: Optional[Receipt] = None


class Transaction(TransactionBase):
    id: uuid.UUID
    user_id: uuid.UUID
    is_income: bool
    is_manual: bool
    created_at: dt.datetime
    updated_at: dt.datetime
    model_config = ConfigDict(from_attributes=True)


class TransactionFilter(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search: Optional[str] = None
    sort_by: Literal['date', 'amount', 'category'] = 'date'
    sort_order: Literal['asc', 'desc'] = 'desc'


class TransactionListResponse(BaseModel):
    transactions: List[Transaction]
    pagination: Pagination


class CategorizeRequest(BaseModel):
    description: str = Field(min_length=1)
    amount: float


class CategorizeResponse(BaseModel):
    category: str


class TransactionStats(BaseModel):
    period: str
    start_date: Optional[dt.date] = None
    end_date: dt.date
    total_income: float
    total_expenses: float
    net_income: float
    transaction_count: int
    average_transaction: float


class ExportRequest(BaseModel):
    format: Literal['csv', 'json'] = 'csv'
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    categories: Optional[List[str]] = None


class ImportRequest(BaseModel):
    # Rows are validated one by one so a bad row does not reject the batch
    transactions: List[dict] = Field(default_factory=list)


class ImportRowError(BaseModel):
    index: int
    error: str


class ImportResult(BaseModel):
    imported: int
    failed: int
    duplicates: int
    errors: List[ImportRowError] = Field(default_factory=list)
