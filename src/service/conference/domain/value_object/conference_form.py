from datetime import datetime
from typing import List, Optional

import attrs


@attrs.define
class ConferenceForm:
    """Caller-supplied conference attributes; validated by Conference.create."""

    name: Optional[str]
    description: Optional[str] = None
    topics: List[str] = attrs.field(factory=list)
    city: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    max_attendees: int = 0
