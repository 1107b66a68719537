"""Chat action schema: what the assistant is allowed to propose.

Every payload here is a draft. Fields are optional because the model may
omit them; the dispatcher fills defaults and the host create models do the
real validation.
"""

import datetime as dt
import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.schemas import (
    ProjectCategory,
    Recurrence,
    TaskPriority,
    TransactionType,
)

_THOUSANDS = re.compile(r"^\d{1,3}(\.\d{3})+$")
_DATETIME_SEP = re.compile(r"(?<=\d)[T ]+(?=\d)")


def coerce_amount(value):
    """Accept numbers the way people type them: "R$ 1.234,50", "50", 50."""
    if not isinstance(value, str):
        return value
    text = value.strip().upper().replace("R$", "").replace(" ", "")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    elif _THOUSANDS.match(text):
        text = text.replace(".", "")
    return text or None


class TransactionDraft(BaseModel):
    description: str | None = None
    amount: float | None = None
    type: TransactionType | None = None
    category: str | None = None
    date: dt.datetime | None = None
    recurrence: Recurrence | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, value):
        return coerce_amount(value)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class TaskDraft(BaseModel):
    title: str | None = None
    date: dt.date | None = None
    time: str | None = None
    priority: TaskPriority | None = None
    recurrence: Recurrence | None = None

    @model_validator(mode="before")
    @classmethod
    def split_datetime(cls, data):
        # Models often answer "2026-10-20T15:00:00" or "2026-10-20 15:00" for a task date.
        if isinstance(data, dict) and isinstance(data.get("date"), str):
            text = data["date"].strip()
            match = _DATETIME_SEP.search(text)
            if match is None:
                return data
            data = dict(data)
            day, clock = text[: match.start()], text[match.end() :]
            data["date"] = day
            if not data.get("time") and clock[:5] not in ("", "00:00"):
                data["time"] = clock[:5]
        return data

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class ListItemDraft(BaseModel):
    list_id: int | str | None = None
    name: str | None = None
    quantity: int | None = None


class ProjectDraft(BaseModel):
    title: str | None = None
    description: str | None = None
    target_amount: float | None = None
    category: ProjectCategory | None = None
    deadline: dt.date | None = None

    @field_validator("target_amount", mode="before")
    @classmethod
    def normalize_amount(cls, value):
        return coerce_amount(value)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class AddTransactionAction(BaseModel):
    type: Literal["ADD_TRANSACTION"]
    payload: TransactionDraft


class AddTaskAction(BaseModel):
    type: Literal["ADD_TASK"]
    payload: TaskDraft


class AddListItemAction(BaseModel):
    type: Literal["ADD_LIST_ITEM"]
    payload: ListItemDraft


class AddProjectAction(BaseModel):
    type: Literal["ADD_PROJECT"]
    payload: ProjectDraft


class NoAction(BaseModel):
    type: Literal["NONE"] = "NONE"
    payload: None = None


ChatAction = Annotated[
    Union[AddTransactionAction, AddTaskAction, AddListItemAction, AddProjectAction, NoAction],
    Field(discriminator="type"),
]


class ChatReply(BaseModel):
    reply: str = Field(min_length=1)
    action: ChatAction | None = None

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action_type(cls, value):
        if isinstance(value, dict) and not value.get("type"):
            # An action object without a type carries no intent.
            return None
        if isinstance(value, dict) and isinstance(value.get("type"), str):
            value = {**value, "type": value["type"].strip().upper()}
            if value["type"] == "NONE":
                value["payload"] = None
        return value

    @property
    def action_type(self) -> str:
        return self.action.type if self.action else "NONE"


# ── Context snapshot ────────────────────────────────────────────────


class TaskRef(BaseModel):
    id: int
    title: str
    date: dt.date


class ListRef(BaseModel):
    id: int
    name: str


class ContextSnapshot(BaseModel):
    tasks: list[TaskRef] = []
    lists: list[ListRef] = []
