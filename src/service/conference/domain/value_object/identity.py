import attrs


@attrs.frozen
class Identity:
    """Authenticated caller as resolved by the identity provider."""

    user_id: str
    email: str

    @property
    def email_local_part(self) -> str:
        return self.email.split('@', 1)[0]
