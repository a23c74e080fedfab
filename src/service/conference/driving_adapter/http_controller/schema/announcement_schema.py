from pydantic import BaseModel


class AnnouncementResponse(BaseModel):
    data: str
