import uuid

from tinydb import Query, TinyDB

from app.models.actions import ContextSnapshot, ListRef, TaskRef
from app.models.schemas import (
    ChatMessage,
    FinancialProject,
    ListCreate,
    ListGroup,
    ListItem,
    ListItemCreate,
    ProjectCreate,
    Task,
    TaskCreate,
    Transaction,
    TransactionCreate,
    TransactionSummary,
)


class _Repository:
    table_name: str
    model: type

    def __init__(self, db: TinyDB):
        self.table = db.table(self.table_name)

    def _from_doc(self, doc):
        return self.model(id=doc.doc_id, **doc)

    def add(self, entity):
        data = entity.model_dump(mode="json")
        data.pop("id", None)
        doc_id = self.table.insert(data)
        entity.id = doc_id
        return entity

    def get(self, id: int):
        doc = self.table.get(doc_id=id)
        if doc is None:
            return None
        return self._from_doc(doc)

    def get_all(self) -> list:
        return [self._from_doc(doc) for doc in self.table.all()]

    def update(self, id: int, **fields):
        doc = self.table.get(doc_id=id)
        if doc is None:
            return None
        # Filter out None values so we only update provided fields
        updates = {k: v for k, v in fields.items() if v is not None}
        if updates:
            self.table.update(updates, doc_ids=[id])
        return self.get(id)

    def delete(self, id: int) -> bool:
        doc = self.table.get(doc_id=id)
        if doc is None:
            return False
        self.table.remove(doc_ids=[id])
        return True


class TransactionRepository(_Repository):
    table_name = "transactions"
    model = Transaction

    def create(self, request: TransactionCreate) -> Transaction:
        return self.add(Transaction(**request.model_dump()))

    def get_all(self) -> list[Transaction]:
        return sorted(
            super().get_all(), key=lambda t: t.date.replace(tzinfo=None), reverse=True
        )

    def summary(self) -> TransactionSummary:
        totals = {"INCOME": 0.0, "EXPENSE": 0.0, "INVESTMENT": 0.0}
        for doc in self.table.all():
            totals[doc["type"]] += doc["amount"]
        return TransactionSummary(
            income=totals["INCOME"],
            expense=totals["EXPENSE"],
            investment=totals["INVESTMENT"],
            balance=totals["INCOME"] - totals["EXPENSE"] - totals["INVESTMENT"],
        )


class TaskRepository(_Repository):
    table_name = "tasks"
    model = Task

    def create(self, request: TaskCreate) -> Task:
        return self.add(Task(**request.model_dump()))

    def get_all(self, status: str | None = None) -> list[Task]:
        if status:
            Tk = Query()
            docs = self.table.search(Tk.status == status)
        else:
            docs = self.table.all()
        tasks = [self._from_doc(doc) for doc in docs]
        return sorted(tasks, key=lambda t: (t.date, t.time))

    def recent(self, limit: int) -> list[Task]:
        """The `limit` most recently created tasks, oldest first."""
        if limit <= 0:
            return []
        docs = sorted(self.table.all(), key=lambda doc: doc.doc_id)[-limit:]
        return [self._from_doc(doc) for doc in docs]

    def toggle(self, id: int) -> Task | None:
        task = self.get(id)
        if task is None:
            return None
        status = "PENDING" if task.status == "DONE" else "DONE"
        return self.update(id, status=status)


class ListRepository(_Repository):
    table_name = "lists"
    model = ListGroup

    def create(self, request: ListCreate) -> ListGroup:
        return self.add(ListGroup(**request.model_dump()))

    def find_by_name(self, name: str) -> ListGroup | None:
        Ls = Query()
        docs = self.table.search(
            Ls.name.test(lambda val: val.strip().lower() == name.strip().lower())
        )
        return self._from_doc(docs[0]) if docs else None

    def resolve(self, ref: int | str | None) -> ListGroup | None:
        """Find a list by id, or by name when the reference is not an id."""
        if ref is None or ref == "":
            return None
        if isinstance(ref, int) or (isinstance(ref, str) and ref.strip().isdigit()):
            found = self.get(int(ref))
            if found is not None:
                return found
        return self.find_by_name(str(ref))

    def add_item(self, list_id: int, request: ListItemCreate) -> ListItem | None:
        doc = self.table.get(doc_id=list_id)
        if doc is None:
            return None

        item = ListItem(id=uuid.uuid4().hex, **request.model_dump())
        items = doc.get("items", [])
        items.append(item.model_dump(mode="json"))
        self.table.update({"items": items}, doc_ids=[list_id])
        return item

    def _find_item(self, item_id: str):
        for doc in self.table.all():
            for index, item in enumerate(doc.get("items", [])):
                if item["id"] == item_id:
                    return doc, index
        return None, None

    def toggle_item(self, item_id: str) -> ListItem | None:
        doc, index = self._find_item(item_id)
        if doc is None:
            return None

        items = doc["items"]
        items[index]["status"] = "PENDING" if items[index]["status"] == "DONE" else "DONE"
        self.table.update({"items": items}, doc_ids=[doc.doc_id])
        return ListItem(**items[index])

    def delete_item(self, item_id: str) -> bool:
        doc, index = self._find_item(item_id)
        if doc is None:
            return False

        items = doc["items"]
        items.pop(index)
        self.table.update({"items": items}, doc_ids=[doc.doc_id])
        return True


class ProjectRepository(_Repository):
    table_name = "projects"
    model = FinancialProject

    def create(self, request: ProjectCreate) -> FinancialProject:
        return self.add(FinancialProject(**request.model_dump()))

    def contribute(
        self, id: int, amount: float, withdraw: bool = False
    ) -> FinancialProject | None:
        project = self.get(id)
        if project is None:
            return None

        current = project.current_amount - amount if withdraw else project.current_amount + amount
        current = max(current, 0)

        updates = {"current_amount": current}
        if current >= project.target_amount:
            updates["status"] = "COMPLETED"
        elif project.status == "COMPLETED":
            updates["status"] = "ACTIVE"
        return self.update(id, **updates)


class ChatRepository(_Repository):
    table_name = "chat_messages"
    model = ChatMessage

    def append(self, conversation: str, sender: str, text: str) -> ChatMessage:
        return self.add(ChatMessage(conversation=conversation, sender=sender, text=text))

    def history(self, conversation: str, limit: int | None = None) -> list[ChatMessage]:
        Msg = Query()
        docs = sorted(
            self.table.search(Msg.conversation == conversation),
            key=lambda doc: doc.doc_id,
        )
        if limit:
            docs = docs[-limit:]
        return [self._from_doc(doc) for doc in docs]


class ConfigRepository:
    """Administrative settings, written by the admin endpoints."""

    AI_KEY = "ai_key"

    def __init__(self, db: TinyDB):
        self.table = db.table("config")

    def get(self, name: str) -> str | None:
        Cfg = Query()
        doc = self.table.get(Cfg.name == name)
        return doc["value"] if doc else None

    def set(self, name: str, value: str) -> None:
        Cfg = Query()
        self.table.upsert({"name": name, "value": value}, Cfg.name == name)

    def clear(self, name: str) -> bool:
        Cfg = Query()
        return bool(self.table.remove(Cfg.name == name))


class AlfredStore:
    """All host repositories over a single TinyDB file."""

    def __init__(self, db_path: str = "alfred.json"):
        self.db = TinyDB(db_path)
        self.transactions = TransactionRepository(self.db)
        self.tasks = TaskRepository(self.db)
        self.lists = ListRepository(self.db)
        self.projects = ProjectRepository(self.db)
        self.chat = ChatRepository(self.db)
        self.config = ConfigRepository(self.db)

    def snapshot(self, task_limit: int) -> ContextSnapshot:
        return ContextSnapshot(
            tasks=[
                TaskRef(id=task.id, title=task.title, date=task.date)
                for task in self.tasks.recent(task_limit)
            ],
            lists=[ListRef(id=group.id, name=group.name) for group in self.lists.get_all()],
        )

    def close(self) -> None:
        self.db.close()
