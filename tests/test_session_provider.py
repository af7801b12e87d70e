"""Tests covering the per-thread session provider."""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import requests

from drive_upload_bridge.clients.session import ThreadLocalSessionProvider


def test_same_thread_reuses_its_session() -> None:
    provider = ThreadLocalSessionProvider()

    assert provider.get() is provider.get()
    assert isinstance(provider.get(), requests.Session)


def test_each_thread_gets_its_own_session() -> None:
    provider = ThreadLocalSessionProvider(factory=requests.Session)
    start_barrier = threading.Barrier(2)

    def fetch(_):
        start_barrier.wait(timeout=5)
        return provider.get()

    with ThreadPoolExecutor(max_workers=2) as executor:
        first, second = executor.map(fetch, range(2))

    assert first is not second


def test_template_session_is_cloned() -> None:
    template = requests.Session()
    template.headers["X-Tenant"] = "acme"
    template.verify = False
    provider = ThreadLocalSessionProvider(session=template)

    session = provider.get()

    assert session is not template
    assert session.headers["X-Tenant"] == "acme"
    assert session.verify is False
