"""Per-thread ``requests.Session`` management."""
from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Optional

import requests
from requests import Session


class ThreadLocalSessionProvider:
    """Lazily creates one ``requests.Session`` per thread.

    Concurrent uploads therefore never share a connection pool or cookie jar.
    When a template session is supplied it is cloned for each thread.
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        factory: Optional[Callable[[], Session]] = None,
    ) -> None:
        self._session_template = session
        self._factory = factory
        self._thread_local = threading.local()

    def _clone_session(self) -> Session:
        base = self._session_template
        if base is None:
            return requests.Session()

        cloned = requests.Session()
        cloned.headers.update(base.headers)
        cloned.proxies.update(base.proxies)
        cloned.hooks = {k: v[:] for k, v in base.hooks.items()}
        cloned.verify = base.verify
        cloned.cert = base.cert
        cloned.trust_env = base.trust_env
        for prefix, adapter in base.adapters.items():
            cloned.mount(prefix, adapter)
        return cloned

    def _build_session(self) -> Session:
        factory = self._factory
        if factory is not None:
            session = factory()
            if session is not None:
                return session
        return self._clone_session()

    def get(self) -> Session:
        session = getattr(self._thread_local, "session", None)
        if session is None:
            session = self._build_session()
            self._thread_local.session = session
        return session
