"""Routes a decoded chat action to the host create handlers.

The model's payload is a draft. Defaults are filled here and the result
goes through the same create models the REST endpoints use, so a chat
action is validated exactly like a form submission.
"""

from datetime import datetime
from typing import Callable, Literal

from loguru import logger
from pydantic import BaseModel, ValidationError

from app.db.repository import AlfredStore
from app.models.actions import (
    AddListItemAction,
    AddProjectAction,
    AddTaskAction,
    AddTransactionAction,
    ChatAction,
)
from app.models.schemas import (
    ListItemCreate,
    ProjectCreate,
    Recurrence,
    TaskCreate,
    TransactionCreate,
)

DEFAULT_DESCRIPTION = "Lançamento via Alfred"
DEFAULT_CATEGORY = "Geral"


class DispatchResult(BaseModel):
    status: Literal["created", "skipped", "rejected", "needs_clarification"]
    action_type: str
    entity_id: int | str | None = None
    detail: str | None = None


class ActionDispatcher:
    def __init__(
        self,
        store: AlfredStore,
        default_category: str = DEFAULT_CATEGORY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.default_category = default_category
        self.clock = clock

    def dispatch(self, action: ChatAction | None) -> DispatchResult:
        if action is None or action.type == "NONE":
            return DispatchResult(status="skipped", action_type="NONE")

        try:
            if isinstance(action, AddTransactionAction):
                result = self._add_transaction(action)
            elif isinstance(action, AddTaskAction):
                result = self._add_task(action)
            elif isinstance(action, AddListItemAction):
                result = self._add_list_item(action)
            elif isinstance(action, AddProjectAction):
                result = self._add_project(action)
            else:
                result = DispatchResult(
                    status="skipped",
                    action_type=action.type,
                    detail="No handler for this action",
                )
        except ValidationError as e:
            fields = sorted({".".join(str(loc) for loc in err["loc"]) for err in e.errors()})
            logger.warning(
                "Dispatch rejected [kind=dispatch] {}: invalid {}",
                action.type,
                ", ".join(fields),
            )
            return DispatchResult(
                status="rejected",
                action_type=action.type,
                detail=f"Invalid fields: {', '.join(fields)}",
            )

        logger.info(
            "Dispatched {} → {} (id={})", action.type, result.status, result.entity_id
        )
        return result

    def _add_transaction(self, action: AddTransactionAction) -> DispatchResult:
        draft = action.payload
        request = TransactionCreate.model_validate(
            {
                "description": draft.description or DEFAULT_DESCRIPTION,
                "amount": draft.amount,
                "type": draft.type or "EXPENSE",
                "category": draft.category or self.default_category,
                "date": draft.date or self.clock(),
                "recurrence": draft.recurrence or Recurrence(),
            }
        )
        created = self.store.transactions.create(request)
        return DispatchResult(status="created", action_type=action.type, entity_id=created.id)

    def _add_task(self, action: AddTaskAction) -> DispatchResult:
        # No date default: a task without a date is the caller's error.
        draft = action.payload
        request = TaskCreate.model_validate(
            {
                "title": draft.title,
                "date": draft.date,
                "time": draft.time or "",
                "priority": draft.priority or "medium",
                "status": "PENDING",
                "recurrence": draft.recurrence or Recurrence(),
            }
        )
        created = self.store.tasks.create(request)
        return DispatchResult(status="created", action_type=action.type, entity_id=created.id)

    def _add_list_item(self, action: AddListItemAction) -> DispatchResult:
        draft = action.payload
        request = ListItemCreate.model_validate(
            {"name": draft.name, "quantity": draft.quantity or 1}
        )

        target = self.store.lists.resolve(draft.list_id)
        if target is None:
            return DispatchResult(
                status="needs_clarification",
                action_type=action.type,
                detail=self._which_list_question(request.name),
            )

        item = self.store.lists.add_item(target.id, request)
        return DispatchResult(status="created", action_type=action.type, entity_id=item.id)

    def _add_project(self, action: AddProjectAction) -> DispatchResult:
        draft = action.payload
        request = ProjectCreate.model_validate(
            {
                "title": draft.title,
                "description": draft.description,
                "target_amount": draft.target_amount,
                "category": draft.category or "GOAL",
                "deadline": draft.deadline,
            }
        )
        created = self.store.projects.create(request)
        return DispatchResult(status="created", action_type=action.type, entity_id=created.id)

    def _which_list_question(self, item_name: str) -> str:
        names = [group.name for group in self.store.lists.get_all()]
        if not names:
            return (
                f"Senhor, ainda não há nenhuma lista cadastrada para incluir "
                f'"{item_name}". Deseja que eu crie uma?'
            )
        return f'Em qual lista devo incluir "{item_name}", Senhor? Disponíveis: {", ".join(names)}.'
