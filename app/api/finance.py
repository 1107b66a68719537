from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from app.db.repository import AlfredStore
from app.deps import get_store
from app.models.schemas import (
    FinancialProject,
    ProjectContribution,
    ProjectCreate,
    Transaction,
    TransactionCreate,
    TransactionSummary,
)

router = APIRouter()


@router.get("/transactions", response_model=list[Transaction])
def list_transactions(store: AlfredStore = Depends(get_store)):
    return store.transactions.get_all()


@router.post("/transactions", response_model=Transaction, status_code=201)
def create_transaction(request: TransactionCreate, store: AlfredStore = Depends(get_store)):
    created = store.transactions.create(request)
    logger.info("Created transaction #{} ({} {})", created.id, created.type, created.amount)
    return created


@router.get("/transactions/summary", response_model=TransactionSummary)
def transaction_summary(store: AlfredStore = Depends(get_store)):
    return store.transactions.summary()


@router.get("/transactions/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: int, store: AlfredStore = Depends(get_store)):
    transaction = store.transactions.get(transaction_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.delete("/transactions/{transaction_id}")
def delete_transaction(transaction_id: int, store: AlfredStore = Depends(get_store)):
    if not store.transactions.delete(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("Deleted transaction #{}", transaction_id)
    return {"detail": "Transaction deleted"}


@router.get("/projects", response_model=list[FinancialProject])
def list_projects(store: AlfredStore = Depends(get_store)):
    return store.projects.get_all()


@router.post("/projects", response_model=FinancialProject, status_code=201)
def create_project(request: ProjectCreate, store: AlfredStore = Depends(get_store)):
    created = store.projects.create(request)
    logger.info("Created project #{} {}", created.id, created.title)
    return created


@router.post("/projects/{project_id}/contributions", response_model=FinancialProject)
def contribute_to_project(
    project_id: int,
    request: ProjectContribution,
    store: AlfredStore = Depends(get_store),
):
    existing = store.projects.get(project_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Project not found")
    if existing.status == "PAUSED":
        raise HTTPException(status_code=400, detail="Project is paused")

    updated = store.projects.contribute(project_id, request.amount, withdraw=request.withdraw)
    logger.info(
        "{} {} on project #{}",
        "Withdrew" if request.withdraw else "Added",
        request.amount,
        project_id,
    )
    return updated


@router.delete("/projects/{project_id}")
def delete_project(project_id: int, store: AlfredStore = Depends(get_store)):
    if not store.projects.delete(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    logger.info("Deleted project #{}", project_id)
    return {"detail": "Project deleted"}
