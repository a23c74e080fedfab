from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.service.conference.domain.entity.profile_entity import Profile
from src.service.conference.domain.enum.tee_shirt_size import TeeShirtSize


class ProfileFormRequest(BaseModel):
    display_name: Optional[str] = None
    tee_shirt_size: Optional[TeeShirtSize] = None

    model_config = ConfigDict(
        json_schema_extra={'example': {'display_name': 'Alice', 'tee_shirt_size': 'M'}}
    )


class ProfileResponse(BaseModel):
    user_id: str
    display_name: Optional[str]
    main_email: Optional[str]
    tee_shirt_size: TeeShirtSize
    conference_keys_to_attend: List[str]
    session_keys_in_wishlist: List[str]

    @classmethod
    def from_entity(cls, profile: Profile) -> 'ProfileResponse':
        return cls(
            user_id=profile.user_id,
            display_name=profile.display_name,
            main_email=profile.main_email,
            tee_shirt_size=profile.tee_shirt_size,
            conference_keys_to_attend=[k.to_websafe() for k in profile.conference_keys_to_attend],
            session_keys_in_wishlist=[k.to_websafe() for k in profile.session_keys_in_wishlist],
        )
