from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ConferenceModel(Base):
    __tablename__ = 'conference'

    key: Mapped[str] = mapped_column(String, primary_key=True)  # websafe EntityKey
    path: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    organizer_user_id: Mapped[str] = mapped_column(String, nullable=False)
    organizer_display_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    topics: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    city: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    max_attendees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    seats_available: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}
