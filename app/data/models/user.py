from sqlalchemy import Column, Integer, String

from app.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False)
    shipping_address = Column(String(500), nullable=True)
