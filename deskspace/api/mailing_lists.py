"""Mailing list API."""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.mailing_list import MailingListCreate, MailingListResponse, MailingListUpdate
from ..services.mailing_list_service import MailingListService

router = APIRouter(prefix="/api/mailing-lists", tags=["mailing-lists"])


@router.get("", response_model=List[MailingListResponse])
def list_mailing_lists(db: Session = Depends(get_db)):
    return MailingListService(db).list_mailing_lists()


@router.get("/{list_id}", response_model=MailingListResponse)
def get_mailing_list(list_id: str, db: Session = Depends(get_db)):
    return MailingListService(db).get_mailing_list(list_id)


@router.post("", response_model=MailingListResponse, status_code=201)
def create_mailing_list(data: MailingListCreate, db: Session = Depends(get_db)):
    return MailingListService(db).create_mailing_list(data)


@router.put("/{list_id}", response_model=MailingListResponse)
def update_mailing_list(list_id: str, data: MailingListUpdate, db: Session = Depends(get_db)):
    return MailingListService(db).update_mailing_list(list_id, data)


@router.delete("/{list_id}", status_code=204)
def delete_mailing_list(list_id: str, db: Session = Depends(get_db)):
    MailingListService(db).delete_mailing_list(list_id)
    return Response(status_code=204)
