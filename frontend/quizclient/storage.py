"""
storage.py — persisted client state.

Only two keys ever live here: the bearer token and the last-known identity.
The backing mapping is whatever outlives a single script run; in the app that
is a plain dict kept in ``st.session_state`` so worker threads can read the
token without a Streamlit script context.
"""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Optional

TOKEN_KEY = "token"
USER_KEY = "user"


class ClientStorage:
    def __init__(self, backing: Optional[MutableMapping] = None):
        self._data = backing if backing is not None else {}

    def get_token(self) -> Optional[str]:
        return self._data.get(TOKEN_KEY) or None

    def set_token(self, token: str) -> None:
        self._data[TOKEN_KEY] = token

    def get_user(self) -> Optional[dict]:
        user = self._data.get(USER_KEY)
        return dict(user) if user else None

    def set_user(self, user: dict) -> None:
        self._data[USER_KEY] = dict(user)

    def clear(self) -> None:
        for key in (TOKEN_KEY, USER_KEY):
            self._data.pop(key, None)
