import hmac
from typing import Any

from tagtally.core.config import Settings
from tagtally.core.exceptions import AuthError
from tagtally.utils.constants import API_KEY_FIELD


class SecurityManager:
    def __init__(self, settings: Settings):
        self.api_key = settings.API_KEY

    def verify_key(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        provided = payload.get(API_KEY_FIELD)
        if not isinstance(provided, str):
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self.api_key.encode("utf-8"))

    def check_key(self, payload: Any) -> None:
        """Raise AuthError unless the payload carries the expected api_key."""
        if not self.verify_key(payload):
            raise AuthError()


def get_security_manager(settings: Settings) -> SecurityManager:
    return SecurityManager(settings)
