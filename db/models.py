# WORKFLOW: Database models for the price store.
# Used by: Persistence gateway, database bootstrap, tests
# Models represent:
# 1. prices - one priced item per row, keyed by the caller-supplied id
#
# Data flow: ZIP upload -> CSV rows -> PriceRecord -> prices table -> CSV download

from sqlalchemy import Column, Date, Index, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Price(Base):
    __tablename__ = "prices"

    id = Column(Integer, primary_key=True, autoincrement=False)
    created_date = Column(Date, nullable=False)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        Index('idx_prices_category', 'category'),
    )

    def __repr__(self) -> str:
        return f"<Price id={self.id} category={self.category!r} price={self.price}>"
