from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class SessionModel(Base):
    __tablename__ = 'session'

    key: Mapped[str] = mapped_column(String, primary_key=True)  # websafe EntityKey
    path: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    highlights: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    speaker: Mapped[str] = mapped_column(String, nullable=False, index=True)
    type_of_session: Mapped[str] = mapped_column(String, nullable=False, index=True)
    start_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Denormalized parent, for readers that do not decode the key
    conference_key: Mapped[str] = mapped_column(String, nullable=False, index=True)
    conference_id: Mapped[int] = mapped_column(Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}
