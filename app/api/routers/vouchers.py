# app/api/routers/vouchers.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import VoucherOut
from app.services.voucher_service import VoucherService

router = APIRouter(prefix="/api/vouchers", tags=["vouchers"])


@router.get("", response_model=List[VoucherOut])
def list_vouchers(db: Session = Depends(get_db)):
    return VoucherService(db).list_active()


@router.get("/{voucher_id}", response_model=VoucherOut)
def get_voucher(voucher_id: int, db: Session = Depends(get_db)):
    return VoucherService(db).get_voucher(voucher_id)
