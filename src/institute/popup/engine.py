"""Notice popup shown to visitors when a page loads.

The popup is a small state machine over the eligible notices::

    HIDDEN --load (non-empty, after delay)--> SHOWING(0)
    SHOWING(i) --dismiss current--> SHOWING(i + 1) | HIDDEN after the last one
    SHOWING(i) --dismiss all--> HIDDEN

Ticking "don't show again today" while dismissing records the notice ids in
the injected store for the rest of the calendar day.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from institute.app.content.models import PopupNotice

from .dismissal import DismissalLog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .store import KeyValueStore

    NoticeSource = Callable[[], Awaitable[list[PopupNotice]]]

LOGGER = logging.getLogger(__name__)

DEFAULT_PRESENTATION_DELAY = 1.0
POPUP_PATH = "/notices/popup"

_POPUP_LIST = TypeAdapter(list[PopupNotice])


class NoticeFetchError(Exception):
    """Raised by a notice source when eligible notices cannot be fetched."""


class PopupState(StrEnum):
    HIDDEN = "hidden"
    SHOWING = "showing"


def http_notice_source(client: httpx.AsyncClient, path: str = POPUP_PATH) -> NoticeSource:
    """Build a notice source that reads the site's popup feed.

    :param client: Client whose base URL points at the site backend
    :param path: Path of the popup feed
    :return: An async callable returning eligible notices in display order
    """

    async def fetch() -> list[PopupNotice]:
        try:
            response = await client.get(path)
            response.raise_for_status()
            return _POPUP_LIST.validate_json(response.content)
        except (httpx.HTTPError, ValidationError) as e:
            msg = f"Could not fetch popup notices: {e}"
            raise NoticeFetchError(msg) from e

    return fetch


class NoticePopup:
    """Presents popup notices one at a time."""

    def __init__(
        self,
        source: NoticeSource,
        store: KeyValueStore,
        *,
        today: Callable[[], date] = date.today,
        presentation_delay: float = DEFAULT_PRESENTATION_DELAY,
    ) -> None:
        """Create a popup.

        :param source: Async callable returning eligible notices, already
        ordered by priority then recency
        :param store: Persistence for the day-scoped dismissal record
        :param today: Clock returning the current calendar day
        :param presentation_delay: Seconds to wait before showing the first notice
        """
        self.source = source
        self.dismissals = DismissalLog(store, today)
        self.presentation_delay = presentation_delay
        self.notices: list[PopupNotice] = []
        self.index = 0
        self.state = PopupState.HIDDEN
        self._loaded = False

    @property
    def visible(self) -> bool:
        return self.state is PopupState.SHOWING

    @property
    def current(self) -> PopupNotice | None:
        """The notice on screen, if any."""
        if not self.visible:
            return None
        return self.notices[self.index]

    @property
    def has_next(self) -> bool:
        """Whether dismissing the current notice shows another one."""
        return self.visible and self.index < len(self.notices) - 1

    @property
    def position(self) -> str:
        """Progress label such as ``"1 of 3"``."""
        return f"{self.index + 1} of {len(self.notices)}"

    async def load(self) -> None:
        """Fetch eligible notices once and show the first one after the delay.

        A failed fetch leaves the popup hidden.
        """
        if self._loaded:
            return
        self._loaded = True

        try:
            notices = await self.source()
        except NoticeFetchError:
            LOGGER.warning("Popup notices unavailable", exc_info=True)
            return

        dismissed = set(self.dismissals.read())
        self.notices = [notice for notice in notices if notice.id not in dismissed]
        if not self.notices:
            return

        await asyncio.sleep(self.presentation_delay)
        self.index = 0
        self.state = PopupState.SHOWING

    def dismiss_current(self, *, dont_show_today: bool = False) -> None:
        """Close the current notice and move on to the next one, if any."""
        if not self.visible:
            return

        if dont_show_today:
            self.dismissals.add(self.notices[self.index].id)

        if self.index < len(self.notices) - 1:
            self.index += 1
        else:
            self.state = PopupState.HIDDEN

    def dismiss_all(self, *, dont_show_today: bool = False) -> None:
        """Close the popup, optionally hiding every remaining notice for today."""
        if not self.visible:
            return

        if dont_show_today:
            self.dismissals.add_many(notice.id for notice in self.notices[self.index :])

        self.state = PopupState.HIDDEN
