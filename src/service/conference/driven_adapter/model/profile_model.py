from typing import List, Optional

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ProfileModel(Base):
    __tablename__ = 'profile'

    key: Mapped[str] = mapped_column(String, primary_key=True)  # websafe EntityKey
    path: Mapped[str] = mapped_column(String, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    main_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tee_shirt_size: Mapped[str] = mapped_column(String(20), nullable=False)
    conference_keys_to_attend: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    session_keys_in_wishlist: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}
