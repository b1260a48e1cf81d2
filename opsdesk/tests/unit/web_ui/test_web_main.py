from __future__ import annotations

from typing import Any, Callable, List

from opsdesk.web_ui import main


class _PageClient:
    """Records lifecycle handlers the way a NiceGUI client would receive them."""

    def __init__(self) -> None:
        self.delete_handlers: List[Callable[[], Any]] = []
        self.disconnect_handlers: List[Callable[[], Any]] = []

    def on_delete(self, handler: Callable[[], Any]) -> None:
        self.delete_handlers.append(handler)

    def on_disconnect(self, handler: Callable[[], Any]) -> None:
        self.disconnect_handlers.append(handler)


def test_debouncer_cancels_once_when_client_is_deleted() -> None:
    page_client = _PageClient()

    scheduler = main._ui_debouncer(page_client)

    assert page_client.delete_handlers == [scheduler.cancel_all]
    assert page_client.disconnect_handlers == []


def test_each_page_build_gets_its_own_scheduler() -> None:
    first, second = _PageClient(), _PageClient()

    one = main._ui_debouncer(first)
    two = main._ui_debouncer(second)

    assert one is not two
    assert len(first.delete_handlers) == len(second.delete_handlers) == 1
