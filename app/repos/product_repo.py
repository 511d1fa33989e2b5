# app/repos/product_repo.py
from sqlalchemy import case, update
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.types import ProductStatus


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Atomowe warunkowe zmniejszenie stanu:
        UPDATE products SET quantity_available = quantity_available - :n
        WHERE id = :id AND quantity_available >= :n

        Zwraca liczbe zmienionych wierszy (0 = ktos wykupil towar w miedzyczasie).
        """
        remaining = ProductModel.quantity_available - quantity
        stmt = (
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.quantity_available >= quantity,
            )
            .values(
                quantity_available=remaining,
                # przy 0 sztuk produkt jest sprzedany
                status=case(
                    (remaining == 0, ProductStatus.SOLD.value),
                    else_=ProductModel.status,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        rowcount = self.db.execute(stmt).rowcount

        product = self.db.get(ProductModel, product_id)
        if product is not None:
            self.db.refresh(product)
        return rowcount
