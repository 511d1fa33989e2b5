# app/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita, transakcja nalezy do serwisu
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_by_buyer(self, buyer_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
                .where(OrderModel.buyer_id == buyer_id)
                .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def list_by_seller(self, seller_id: int) -> list[OrderModel]:
        sold = (
            select(OrderItemModel.order_id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .where(ProductModel.seller_id == seller_id)
        )
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
                .where(OrderModel.id.in_(sold))
                .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def commit(self):
        self.db.commit()
