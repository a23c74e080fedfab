from datetime import datetime
from typing import Optional

import attrs


@attrs.define
class SessionForm:
    name: Optional[str]
    highlights: Optional[str] = None
    speaker: Optional[str] = None
    type_of_session: Optional[str] = None
    start_time: int = 0
    date: Optional[datetime] = None
    duration: int = 0
