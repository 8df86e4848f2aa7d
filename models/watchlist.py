from sqlalchemy import Column, Integer, DateTime, ForeignKey, func

from models.base import Base


# Saved products per user. Rows go away with either side (FK cascade).
class WatchlistEntry(Base):
    __tablename__ = 'user_watchlist'

    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), primary_key=True)
    created_at = Column(DateTime, default=func.now())
