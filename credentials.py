import base64
import json
import logging
import time
from abc import ABC, abstractmethod

import requests
from google.auth import crypt
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from config import SHEETS_SCOPE, TOKEN_URI

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME = 3600


def base64url_encode(data) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class TokenProvider(ABC):
    """Obtains a bearer token for one OAuth scope. Returns None on failure."""

    scope = SHEETS_SCOPE

    @abstractmethod
    def get_token(self):
        """Bearer token string, or None when the exchange failed."""


class ServiceAccountTokenProvider(TokenProvider):
    """Delegates the token exchange to google-auth."""

    def __init__(self, service_account_info, scope=SHEETS_SCOPE):
        self.service_account_info = service_account_info
        self.scope = scope

    def get_token(self):
        try:
            info = self.service_account_info
            if isinstance(info, str):
                info = json.loads(info)

            creds = service_account.Credentials.from_service_account_info(info, scopes=[self.scope])
            creds.refresh(Request())
        except (GoogleAuthError, ValueError) as e:
            logger.error("Service account token refresh failed: %s", e)
            return None

        return creds.token


class SignedAssertionTokenProvider(TokenProvider):
    """Signs an RS256 assertion locally and exchanges it at the token endpoint."""

    def __init__(self, email, private_key, scope=SHEETS_SCOPE, token_uri=TOKEN_URI, session=None, timeout=10):
        self.email = email
        self.private_key = private_key
        self.scope = scope
        self.token_uri = token_uri
        self.session = session or requests.Session()
        self.timeout = timeout

    def _signer(self):
        return crypt.RSASigner.from_string(self.private_key)

    def build_assertion(self, now=None):
        if now is None:
            now = int(time.time())

        header = {"alg": "RS256", "typ": "JWT"}
        payload = {
            "iss": self.email,
            "scope": self.scope,
            "aud": self.token_uri,
            "exp": now + ASSERTION_LIFETIME,
            "iat": now,
        }

        signing_input = "{}.{}".format(
            base64url_encode(json.dumps(header, separators=(",", ":"))),
            base64url_encode(json.dumps(payload, separators=(",", ":"))),
        )
        signature = self._signer().sign(signing_input.encode("ascii"))

        return f"{signing_input}.{base64url_encode(signature)}"

    def get_token(self):
        if not self.email or not self.private_key:
            logger.error("Service account email or private key is not configured")
            return None

        try:
            assertion = self.build_assertion()
        except Exception as e:
            logger.error("Could not sign token assertion: %s", e)
            return None

        try:
            response = self.session.post(
                self.token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Token exchange request failed: %s", e)
            return None

        if not response.ok:
            logger.error("Token exchange error: %s %s", response.status_code, response.text)
            return None

        try:
            return response.json()["access_token"]
        except (ValueError, KeyError) as e:
            logger.error("Malformed token response: %s", e)
            return None


def token_provider_from_config(config):
    if config.service_account_json:
        return ServiceAccountTokenProvider(config.service_account_json)

    return SignedAssertionTokenProvider(
        config.service_account_email,
        config.private_key,
        timeout=config.sheets_timeout,
    )
