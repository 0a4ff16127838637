from wordlers.errors import ValidationError


class UserProfile:
    """The caller's identity and display name, passed explicitly with each request."""

    def __init__(self, user_id: str, display_name: str):
        self.user_id = user_id
        self.display_name = display_name

    @classmethod
    def from_payload(cls, data) -> 'UserProfile':
        data = data or {}
        user_id = data.get('user_id')
        name = (data.get('display_name') or '').strip()
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValidationError('user_id is required')
        if not name:
            raise ValidationError('display_name is required')
        return cls(user_id.strip(), name)
