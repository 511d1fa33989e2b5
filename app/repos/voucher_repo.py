# app/repos/voucher_repo.py
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from app.data.models.voucher import VoucherModel


class VoucherRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_voucher(self, voucher_id: int) -> VoucherModel | None:
        return self.db.get(VoucherModel, voucher_id)

    def get_by_code(self, code: str) -> VoucherModel | None:
        return self.db.execute(
            select(VoucherModel).where(VoucherModel.discount_code == code)
        ).scalar_one_or_none()

    def list_active(self) -> list[VoucherModel]:
        return list(
            self.db.execute(
                select(VoucherModel)
                .where(VoucherModel.is_active.is_(True))
                .order_by(VoucherModel.id)
            ).scalars()
        )

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(VoucherModel)).scalar_one()

    def add_voucher(self, voucher: VoucherModel) -> VoucherModel:
        self.db.add(voucher)
        self.db.flush()
        return voucher

    def increment_usage(self, voucher_id: int) -> int:
        """
        UPDATE vouchers SET usage_count = usage_count + 1
        WHERE id = :id AND (usage_limit IS NULL OR usage_count < usage_limit)
        """
        stmt = (
            update(VoucherModel)
            .where(
                VoucherModel.id == voucher_id,
                or_(
                    VoucherModel.usage_limit.is_(None),
                    VoucherModel.usage_count < VoucherModel.usage_limit,
                ),
            )
            .values(usage_count=VoucherModel.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        rowcount = self.db.execute(stmt).rowcount

        voucher = self.db.get(VoucherModel, voucher_id)
        if voucher is not None:
            self.db.refresh(voucher)
        return rowcount

    def commit(self):
        self.db.commit()
