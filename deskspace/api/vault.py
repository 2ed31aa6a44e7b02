"""Vault API. Bodies are a tagged union on ``type``."""

from typing import List

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.vault import VaultEntry, VaultItemResponse
from ..services.vault_service import VaultService

router = APIRouter(prefix="/api/vault", tags=["vault"])


@router.get("", response_model=List[VaultItemResponse])
def list_vault_items(db: Session = Depends(get_db)):
    return VaultService(db).list_items()


@router.get("/{item_id}", response_model=VaultItemResponse)
def get_vault_item(item_id: str, db: Session = Depends(get_db)):
    return VaultService(db).get_item(item_id)


@router.post("", response_model=VaultItemResponse, status_code=201)
def create_vault_item(entry: VaultEntry = Body(...), db: Session = Depends(get_db)):
    return VaultService(db).create_item(entry)


@router.put("/{item_id}", response_model=VaultItemResponse)
def update_vault_item(item_id: str, entry: VaultEntry = Body(...), db: Session = Depends(get_db)):
    """Replace the item; fields of the previous type are cleared."""
    return VaultService(db).update_item(item_id, entry)


@router.delete("/{item_id}", status_code=204)
def delete_vault_item(item_id: str, db: Session = Depends(get_db)):
    VaultService(db).delete_item(item_id)
    return Response(status_code=204)
