from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from app.db.repository import AlfredStore
from app.deps import get_store
from app.models.schemas import Task, TaskCreate, TaskUpdate

router = APIRouter()


@router.get("/tasks", response_model=list[Task])
def list_tasks(status: str | None = None, store: AlfredStore = Depends(get_store)):
    return store.tasks.get_all(status=status)


@router.post("/tasks", response_model=Task, status_code=201)
def create_task(request: TaskCreate, store: AlfredStore = Depends(get_store)):
    created = store.tasks.create(request)
    logger.info("Created task #{} for {}", created.id, created.date)
    return created


@router.get("/tasks/{task_id}", response_model=Task)
def get_task(task_id: int, store: AlfredStore = Depends(get_store)):
    task = store.tasks.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/tasks/{task_id}", response_model=Task)
def update_task(task_id: int, request: TaskUpdate, store: AlfredStore = Depends(get_store)):
    if store.tasks.get(task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")

    updates = request.model_dump(mode="json", exclude_none=True)
    updated = store.tasks.update(task_id, **updates)
    logger.info("Updated task #{}", task_id)
    return updated


@router.post("/tasks/{task_id}/toggle", response_model=Task)
def toggle_task(task_id: int, store: AlfredStore = Depends(get_store)):
    toggled = store.tasks.toggle(task_id)
    if toggled is None:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("Task #{} is now {}", task_id, toggled.status)
    return toggled


@router.delete("/tasks/{task_id}")
def delete_task(task_id: int, store: AlfredStore = Depends(get_store)):
    if not store.tasks.delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("Deleted task #{}", task_id)
    return {"detail": "Task deleted"}
