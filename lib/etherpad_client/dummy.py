from __future__ import annotations

import logging
import time
from typing import Any, Callable

from .client import CookieSetter, EtherpadClient
from .config_types import DEFAULT_API_VERSION, ClientConfig
from .envelope import Outcome, Success

logger = logging.getLogger(__name__)

DUMMY_SERVER_VERSION = "1.3.0"
DUMMY_GROUP_ID = "g.dummygroupid000"
DUMMY_AUTHOR_ID = "a.dummyauthorid00"
DUMMY_SESSION_ID = "s.dummysessionid0"
DUMMY_READONLY_ID = "r.dummyreadonlyid"
DUMMY_AUTHOR_NAME = "Dummy Author"


def _dummy_session() -> dict[str, Any]:
    return {"groupID": DUMMY_GROUP_ID, "authorID": DUMMY_AUTHOR_ID, "validUntil": int(time.time()) + 3600}


_RESPONSES: dict[str, Callable[[dict[str, Any]], Any]] = {
    "checkToken": lambda p: None,
    "createGroup": lambda p: {"groupID": DUMMY_GROUP_ID},
    "createGroupIfNotExistsFor": lambda p: {"groupID": DUMMY_GROUP_ID},
    "deleteGroup": lambda p: None,
    "listPads": lambda p: {"padIDs": []},
    "createGroupPad": lambda p: {"padID": f"{p.get('groupID') or DUMMY_GROUP_ID}${p.get('padName', '')}"},
    "listAllGroups": lambda p: {"groupIDs": []},
    "createAuthor": lambda p: {"authorID": DUMMY_AUTHOR_ID},
    "createAuthorIfNotExistsFor": lambda p: {"authorID": DUMMY_AUTHOR_ID},
    "listPadsOfAuthor": lambda p: {"padIDs": []},
    "getAuthorName": lambda p: DUMMY_AUTHOR_NAME,
    "createSession": lambda p: {"sessionID": DUMMY_SESSION_ID},
    "deleteSession": lambda p: None,
    "getSessionInfo": lambda p: _dummy_session(),
    "listSessionsOfGroup": lambda p: {DUMMY_SESSION_ID: _dummy_session()},
    "listSessionsOfAuthor": lambda p: {DUMMY_SESSION_ID: _dummy_session()},
    "getText": lambda p: {"text": ""},
    "getHTML": lambda p: {"html": ""},
    "setText": lambda p: None,
    "setHTML": lambda p: None,
    "createPad": lambda p: None,
    "getRevisionsCount": lambda p: {"revisions": 0},
    "padUsersCount": lambda p: {"padUsersCount": 0},
    "getLastEdited": lambda p: {"lastEdited": 0},
    "deletePad": lambda p: None,
    "getReadOnlyID": lambda p: {"readOnlyID": DUMMY_READONLY_ID},
    "listAuthorsOfPad": lambda p: {"authorIDs": []},
    "setPublicStatus": lambda p: None,
    "getPublicStatus": lambda p: {"publicStatus": False},
    "setPassword": lambda p: None,
    "isPasswordProtected": lambda p: {"isPasswordProtected": False},
    "padUsers": lambda p: {"padUsers": []},
    "sendClientsMessage": lambda p: None,
}


class DummyClient(EtherpadClient):
    """Stand-in used while testing: same API, fixed successful answers, no network."""

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            cookie_setter: CookieSetter | None = None,
            clock: Callable[[], float] = time.time,
            **_ignored: Any,
    ):
        self._apikey = cfg.apikey
        self._base_url = (cfg.base_url or "").strip().strip("/")
        self._api_url = f"{self._base_url}/api"
        self._api_version = cfg.api_version or DEFAULT_API_VERSION
        self._cfg = cfg
        self._cookie_setter = cookie_setter
        self._clock = clock
        self.last_session_cookie = None
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def close(self) -> None:
        return None

    def request(self, function: str, params: dict[str, Any] | None = None, method: str = "GET") -> Outcome:
        params = dict(params or {})
        self.calls.append((method, function, params))
        logger.debug("dummy %s %s", method, function)
        answer = _RESPONSES.get(function)
        return Success(answer(params) if answer else None)

    def get_version(self) -> str:
        return DUMMY_SERVER_VERSION
