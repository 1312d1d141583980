import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import requests

from use_cases.auth_errors import ProviderError

log = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts"
REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class ProviderIdentity:
    user_id: str
    email: str
    id_token: str
    expires_at: datetime


class FirebaseIdentityProvider:
    """Thin client for the Firebase Authentication REST API."""

    def __init__(self, api_key: Optional[str], timeout: float = REQUEST_TIMEOUT):
        self.api_key = api_key
        self.timeout = timeout

    def sign_in_with_password(self, email: str, password: str) -> ProviderIdentity:
        return self._call("signInWithPassword", email, password)

    def sign_up_with_password(self, email: str, password: str) -> ProviderIdentity:
        return self._call("signUp", email, password)

    def _call(self, method: str, email: str, password: str) -> ProviderIdentity:
        if not self.api_key:
            raise ProviderError("CONFIGURATION_MISSING", "Identity provider API key is not configured.")

        url = f"{IDENTITY_TOOLKIT_URL}:{method}"
        payload = {"email": email, "password": password, "returnSecureToken": True}

        try:
            response = requests.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning(f"Identity provider unreachable during {method}: {e}")
            raise ProviderError("NETWORK_ERROR", str(e)) from e

        if response.status_code != 200:
            code = _error_code(response)
            log.warning(f"Identity provider rejected {method}: {code}")
            raise ProviderError(code)

        try:
            data = response.json()
            expires_in = int(data.get("expiresIn", 3600))
            return ProviderIdentity(
                user_id=data["localId"],
                email=data.get("email", email),
                id_token=data["idToken"],
                expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError("MALFORMED_RESPONSE", f"Unexpected {method} response: {e}") from e


def _error_code(response: requests.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP_{response.status_code}"
    # Firebase appends details after " : ", e.g. "WEAK_PASSWORD : Password should be..."
    return str(message).split(" : ", 1)[0]
