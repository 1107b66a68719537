import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator

RecurrencePeriod = Literal["NONE", "DAILY", "WEEKLY", "MONTHLY", "YEARLY"]
TransactionType = Literal["INCOME", "EXPENSE", "INVESTMENT"]
TaskPriority = Literal["low", "medium", "high"]
TaskStatus = Literal["PENDING", "DONE", "DEFERRED", "CANCELLED"]
ItemStatus = Literal["PENDING", "DONE", "OUT_OF_STOCK"]
ListType = Literal["SUPPLIES", "WISHLIST"]
ProjectCategory = Literal["GOAL", "RESERVE", "ASSET"]
ProjectStatus = Literal["ACTIVE", "COMPLETED", "PAUSED"]


def _upper(value):
    return value.strip().upper() if isinstance(value, str) else value


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class Recurrence(BaseModel):
    period: RecurrencePeriod = "NONE"
    interval: int = Field(default=1, ge=1)
    count: int | None = Field(default=None, ge=1)

    @field_validator("period", mode="before")
    @classmethod
    def normalize_period(cls, value):
        return _upper(value)


# ── Host entities ───────────────────────────────────────────────────


class Transaction(BaseModel):
    id: int | None = None
    description: str
    amount: float
    type: TransactionType
    category: str
    date: dt.datetime
    recurrence: Recurrence = Field(default_factory=Recurrence)
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class Task(BaseModel):
    id: int | None = None
    title: str
    date: dt.date
    time: str = ""
    priority: TaskPriority = "medium"
    status: TaskStatus = "PENDING"
    recurrence: Recurrence = Field(default_factory=Recurrence)
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class ListItem(BaseModel):
    id: str
    name: str
    quantity: int = 1
    category: str = ""
    status: ItemStatus = "PENDING"


class ListGroup(BaseModel):
    id: int | None = None
    name: str
    type: ListType = "SUPPLIES"
    items: list[ListItem] = []


class FinancialProject(BaseModel):
    id: int | None = None
    title: str
    description: str | None = None
    target_amount: float
    current_amount: float = 0
    deadline: dt.date | None = None
    category: ProjectCategory = "GOAL"
    status: ProjectStatus = "ACTIVE"
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class ChatMessage(BaseModel):
    id: int | None = None
    conversation: str = "web"
    sender: Literal["user", "alfred"]
    text: str
    timestamp: dt.datetime = Field(default_factory=dt.datetime.now)


# ── Create / update requests ────────────────────────────────────────
# Shared by the REST handlers and the chat action dispatcher.


class TransactionCreate(BaseModel):
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)
    type: TransactionType = "EXPENSE"
    category: str = Field(min_length=1)
    date: dt.datetime
    recurrence: Recurrence = Field(default_factory=Recurrence)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _upper(value)


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    date: dt.date
    time: str = ""
    priority: TaskPriority = "medium"
    status: TaskStatus = "PENDING"
    recurrence: Recurrence = Field(default_factory=Recurrence)

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value):
        return _lower(value)


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    date: dt.date | None = None
    time: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    recurrence: Recurrence | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value):
        return _lower(value)


class ListCreate(BaseModel):
    name: str = Field(min_length=1)
    type: ListType = "SUPPLIES"


class ListItemCreate(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    category: str = ""


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    target_amount: float = Field(gt=0)
    deadline: dt.date | None = None
    category: ProjectCategory = "GOAL"

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value):
        return _upper(value)


class ProjectContribution(BaseModel):
    amount: float = Field(gt=0)
    withdraw: bool = False


class TransactionSummary(BaseModel):
    income: float
    expense: float
    investment: float
    balance: float


class AIKeyRequest(BaseModel):
    api_key: str = Field(min_length=1)


class SystemConfigStatus(BaseModel):
    ai_key_configured: bool
    source: Literal["admin", "environment", "none"]
    model: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation: str = "web"

    @field_validator("message")
    @classmethod
    def strip_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value
