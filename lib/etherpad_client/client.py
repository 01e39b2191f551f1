from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from email.utils import formatdate
from typing import Any, Callable
from urllib.parse import urlsplit

from .config_types import DEFAULT_API_VERSION, ClientConfig
from .envelope import Failure, FailureKind, Outcome, Success, decode, decode_version, encode_params
from .errors import (
    InvalidApiKeyError,
    InvalidBaseUrlError,
    MissingApiKeyError,
    UnableToRetrieveVersionError,
    UnsupportedApiVersionError,
)
from .security import SecurityPolicy
from .semver import is_version_at_least
from .transport import Transport

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "sessionID"
TOKEN_CHECK_MIN_VERSION = "1.2"


@dataclass(frozen=True)
class CookieDescriptor:
    name: str
    value: str
    expires: int
    path: str = "/"
    domain: str = ""
    secure: bool = False

    def header(self) -> str:
        """Render as a ``Set-Cookie`` header value."""
        parts = [
            f"{self.name}={self.value}",
            f"Expires={formatdate(self.expires, usegmt=True)}",
            f"Path={self.path}",
        ]
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        return "; ".join(parts)


CookieSetter = Callable[[CookieDescriptor], None]


def _valid_api_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in {"http", "https"} and bool(parts.hostname) and " " not in url


class EtherpadClient:
    """Talks to the Etherpad Lite HTTP API.

    Construction validates the settings, negotiates the API version and checks
    the API key; any failure raises and no client is produced. After that,
    every API method reports failure with a falsy return value instead of
    raising. Use :meth:`request` to get the structured outcome.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            transport: Transport | None = None,
            policy: SecurityPolicy | None = None,
            cookie_setter: CookieSetter | None = None,
            clock: Callable[[], float] = time.time,
    ):
        if not cfg.apikey:
            raise MissingApiKeyError("The settings have no API key.")
        self._apikey = cfg.apikey

        self._base_url = cfg.base_url.strip().strip("/")
        self._api_url = f"{self._base_url}/api"
        if not _valid_api_url(self._api_url):
            raise InvalidBaseUrlError(f"Not a valid server url: {cfg.base_url!r}")

        self._api_version = cfg.api_version or DEFAULT_API_VERSION
        self._cfg = cfg
        self._cookie_setter = cookie_setter
        self._clock = clock
        self.last_session_cookie: CookieDescriptor | None = None

        self._t = transport or Transport(cfg, policy=policy)
        try:
            self._bootstrap()
        except Exception:
            self._t.close()
            raise

    def _bootstrap(self) -> None:
        if not self.check_version(self._api_version):
            raise UnsupportedApiVersionError(
                f"The server does not support API version {self._api_version}."
            )
        if self.check_version(TOKEN_CHECK_MIN_VERSION, self._api_version):
            if not self.check_token():
                raise InvalidApiKeyError("The server rejected the API key.")
        logger.debug("connected to %s (api %s)", self._base_url, self._api_version)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_version(self) -> str:
        return self._api_version

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "EtherpadClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- protocol ---

    def request(self, function: str, params: dict[str, Any] | None = None, method: str = "GET") -> Outcome:
        args = encode_params(params, self._apikey)
        url = f"{self._api_url}/{self._api_version}/{function}"
        logger.debug("%s %s", method, function)

        if method == "POST":
            raw = self._t.post(url, args)
        else:
            raw = self._t.get(url, args)
        if not raw:
            return Failure(FailureKind.TRANSPORT_ERROR, f"{method} {function}: no response")

        outcome = decode(raw)
        if isinstance(outcome, Failure):
            logger.warning(
                "%s failed: %s (code=%s) %s", function, outcome.kind.value, outcome.code, outcome.message
            )
        return outcome

    def call(self, function: str, params: dict[str, Any] | None = None, method: str = "GET") -> Any:
        """Return the response data, or False for any kind of failure."""
        outcome = self.request(function, params, method)
        if isinstance(outcome, Success):
            return outcome.data
        return False

    def _get(self, function: str, params: dict[str, Any] | None = None) -> Any:
        return self.call(function, params, "GET")

    def _post(self, function: str, params: dict[str, Any] | None = None) -> Any:
        return self.call(function, params, "POST")

    def _post_ok(self, function: str, params: dict[str, Any] | None = None) -> bool:
        return bool(self.request(function, params, "POST"))

    def _post_field(self, function: str, field: str, params: dict[str, Any] | None = None) -> Any:
        data = self._post(function, params)
        if isinstance(data, dict) and data.get(field):
            return data[field]
        return False

    # --- version / token ---

    def get_version(self) -> str:
        """Ask the server for its current API version (unauthenticated)."""
        raw = self._t.get(self._api_url)
        version = decode_version(raw)
        if version is None:
            raise UnableToRetrieveVersionError(f"Could not read the API version from {self._api_url}.")
        return version

    def check_version(self, needed_version: str, used_version: str | None = None) -> bool:
        current = used_version if used_version is not None else self.get_version()
        return is_version_at_least(current, needed_version)

    def check_token(self) -> bool:
        return bool(self.request("checkToken"))

    # --- groups ---

    def create_group(self) -> str | bool:
        return self._post_field("createGroup", "groupID")

    def create_group_if_not_exists_for(self, group_mapper: str) -> str | bool:
        return self._post_field("createGroupIfNotExistsFor", "groupID", {"groupMapper": group_mapper})

    def delete_group(self, group_id: str) -> bool:
        return self._post_ok("deleteGroup", {"groupID": group_id})

    def list_pads(self, group_id: str) -> Any:
        return self._get("listPads", {"groupID": group_id})

    def create_group_pad(self, group_id: str, pad_name: str, text: str | None = None) -> str | bool:
        return self._post_field("createGroupPad", "padID", {
            "groupID": group_id,
            "padName": pad_name,
            "text": text,
        })

    def list_all_groups(self) -> Any:
        return self._get("listAllGroups")

    # --- authors ---

    def create_author(self, name: str) -> str | bool:
        return self._post_field("createAuthor", "authorID", {"name": name})

    def create_author_if_not_exists_for(self, author_mapper: str, name: str) -> str | bool:
        return self._post_field("createAuthorIfNotExistsFor", "authorID", {
            "authorMapper": author_mapper,
            "name": name,
        })

    def list_pads_of_author(self, author_id: str) -> Any:
        return self._get("listPadsOfAuthor", {"authorID": author_id})

    def get_author_name(self, author_id: str) -> Any:
        return self._get("getAuthorName", {"authorID": author_id})

    # --- sessions ---

    def create_session(self, group_id: str, author_id: str) -> bool:
        """Open a session and hand its cookie to the cookie setter.

        Returns True on success; the session itself is only available as
        :attr:`last_session_cookie`.
        """
        valid_until = int(self._clock()) + int(self._cfg.cookie_time)
        session = self._post("createSession", {
            "groupID": group_id,
            "authorID": author_id,
            "validUntil": valid_until,
        })
        if not isinstance(session, dict) or not session.get("sessionID"):
            return False

        cookie = CookieDescriptor(
            name=SESSION_COOKIE_NAME,
            value=str(session["sessionID"]),
            expires=valid_until,
            path="/",
            domain=self._cfg.cookie_domain,
            # cookie travels over tls only when the server is reached over https
            secure=self._cfg.base_url.strip().lower().startswith("https://"),
        )
        self.last_session_cookie = cookie
        if self._cookie_setter is not None:
            self._cookie_setter(cookie)
        return True

    def delete_session(self, session_id: str) -> bool:
        return self._post_ok("deleteSession", {"sessionID": session_id})

    def get_session_info(self, session_id: str) -> Any:
        return self._get("getSessionInfo", {"sessionID": session_id})

    def list_sessions_of_group(self, group_id: str) -> Any:
        return self._get("listSessionsOfGroup", {"groupID": group_id})

    def list_sessions_of_author(self, author_id: str) -> Any:
        return self._get("listSessionsOfAuthor", {"authorID": author_id})

    # --- pad content ---

    def get_text(self, pad_id: str, rev: int | str | None = None) -> Any:
        params: dict[str, Any] = {"padID": pad_id}
        if rev is not None:
            params["rev"] = rev
        return self._get("getText", params)

    def get_html(self, pad_id: str, rev: int | str | None = None) -> Any:
        params: dict[str, Any] = {"padID": pad_id}
        if rev is not None:
            params["rev"] = rev
        return self._get("getHTML", params)

    def set_text(self, pad_id: str, text: str) -> bool:
        return self._post_ok("setText", {"padID": pad_id, "text": text})

    def set_html(self, pad_id: str, html: str) -> bool:
        return self._post_ok("setHTML", {"padID": pad_id, "html": html})

    # --- pads ---
    # Group pads are named GROUPID$padname; the server refuses '$' in public pad names.

    def create_pad(self, pad_id: str, text: str | None = None) -> bool:
        return self._post_ok("createPad", {"padID": pad_id, "text": text})

    def get_revisions_count(self, pad_id: str) -> Any:
        return self._get("getRevisionsCount", {"padID": pad_id})

    def pad_users_count(self, pad_id: str) -> Any:
        return self._get("padUsersCount", {"padID": pad_id})

    def get_last_edited(self, pad_id: str) -> Any:
        return self._get("getLastEdited", {"padID": pad_id})

    def delete_pad(self, pad_id: str) -> bool:
        return self._post_ok("deletePad", {"padID": pad_id})

    def get_readonly_id(self, pad_id: str) -> str | bool:
        data = self._get("getReadOnlyID", {"padID": pad_id})
        if isinstance(data, dict) and data.get("readOnlyID"):
            return data["readOnlyID"]
        return False

    def list_authors_of_pad(self, pad_id: str) -> Any:
        return self._get("listAuthorsOfPad", {"padID": pad_id})

    def set_public_status(self, pad_id: str, public_status: bool | str) -> bool:
        if isinstance(public_status, bool):
            public_status = "true" if public_status else "false"
        return self._post_ok("setPublicStatus", {"padID": pad_id, "publicStatus": public_status})

    def get_public_status(self, pad_id: str) -> Any:
        return self._get("getPublicStatus", {"padID": pad_id})

    def set_password(self, pad_id: str, password: str) -> bool:
        return self._post_ok("setPassword", {"padID": pad_id, "password": password})

    def is_password_protected(self, pad_id: str) -> Any:
        return self._get("isPasswordProtected", {"padID": pad_id})

    def pad_users(self, pad_id: str) -> Any:
        return self._get("padUsers", {"padID": pad_id})

    def send_clients_message(self, pad_id: str, msg: str) -> bool:
        return self._post_ok("sendClientsMessage", {"padID": pad_id, "msg": msg})

