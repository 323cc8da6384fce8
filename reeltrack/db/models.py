from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint

from .database import Base


class CatalogEntryRow(Base):
    __tablename__ = "catalog_entries"
    __table_args__ = (UniqueConstraint("kind", "external_id", name="uq_catalog_kind_external_id"),)

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String, nullable=False)  # movie / tv
    external_id = Column(Integer, nullable=False, index=True)

    title = Column(String, nullable=False, default="Untitled")
    year = Column(Integer, nullable=True)
    overview = Column(Text, default="")
    image_url = Column(String, nullable=True)
    rating = Column(Float, nullable=True)
    top_cast_json = Column(String, default="[]")

    # tv
    networks_json = Column(String, default="[]")
    status = Column(String, nullable=True)
    first_air_date = Column(String, nullable=True)
    last_air_date = Column(String, nullable=True)
    next_air_date = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, index=True)


class UserRow(Base):
    __tablename__ = "users"

    user_id = Column(String, primary_key=True)
    theme = Column(String, nullable=False, default="dark")


class WatchlistRef(Base):
    __tablename__ = "watchlist_refs"
    __table_args__ = (UniqueConstraint("user_id", "kind", "external_id", name="uq_watchlist_ref"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False)
    kind = Column(String, nullable=False)
    external_id = Column(Integer, nullable=False)
