from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from app.db.repository import AlfredStore
from app.deps import get_store
from app.models.schemas import ListCreate, ListGroup, ListItem, ListItemCreate

router = APIRouter()


@router.get("/lists", response_model=list[ListGroup])
def list_groups(store: AlfredStore = Depends(get_store)):
    return store.lists.get_all()


@router.post("/lists", response_model=ListGroup, status_code=201)
def create_list(request: ListCreate, store: AlfredStore = Depends(get_store)):
    created = store.lists.create(request)
    logger.info("Created list #{} {}", created.id, created.name)
    return created


@router.delete("/lists/{list_id}")
def delete_list(list_id: int, store: AlfredStore = Depends(get_store)):
    if not store.lists.delete(list_id):
        raise HTTPException(status_code=404, detail="List not found")
    logger.info("Deleted list #{}", list_id)
    return {"detail": "List deleted"}


@router.post("/lists/{list_id}/items", response_model=ListItem, status_code=201)
def add_item(list_id: int, request: ListItemCreate, store: AlfredStore = Depends(get_store)):
    item = store.lists.add_item(list_id, request)
    if item is None:
        raise HTTPException(status_code=404, detail="List not found")
    logger.info("Added {} to list #{}", item.name, list_id)
    return item


@router.post("/items/{item_id}/toggle", response_model=ListItem)
def toggle_item(item_id: str, store: AlfredStore = Depends(get_store)):
    item = store.lists.toggle_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.delete("/items/{item_id}")
def delete_item(item_id: str, store: AlfredStore = Depends(get_store)):
    if not store.lists.delete_item(item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    logger.info("Deleted item {}", item_id)
    return {"detail": "Item deleted"}
