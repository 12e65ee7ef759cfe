"""
Session Tracker - Lazily allocated review pass ids

A session id is only written to the ledger when the first item of a pass
is about to be shown. Ids come from an AUTOINCREMENT column, so a new pass
always gets an id greater than every earlier one.
"""

from __future__ import annotations

import logging
from typing import Optional

from recall.errors import ItemNotFound
from recall.history.item_store import ItemStore
from recall.history.models import Item, ReviewSession

logger = logging.getLogger(__name__)


class SessionTracker:
    """Holds the id of the open pass for one scheduler instance."""

    def __init__(self, store: ItemStore):
        self.store = store
        self._session_id: Optional[int] = None

    @property
    def session_id(self) -> Optional[int]:
        """Open session id, or None if no item has been shown yet."""
        return self._session_id

    def current_session(self) -> int:
        """Return the open session id, allocating one on first use."""
        if self._session_id is None:
            with self.store.session_scope() as session:
                ledger_row = ReviewSession(created_at=self.store.clock())
                session.add(ledger_row)
                session.flush()
                self._session_id = ledger_row.id
            logger.info("Opened review session %d", self._session_id)
        return self._session_id

    def mark_shown(self, key: str, session_id: int) -> None:
        """
        Stamp key as shown in session_id.

        Raises:
            ItemNotFound: if key is not stored
        """
        with self.store.session_scope() as session:
            count = (
                session.query(Item)
                .filter(Item.key == key)
                .update({Item.session_id: session_id}, synchronize_session=False)
            )
            if count == 0:
                raise ItemNotFound(key)

    def close(self) -> None:
        """Forget the open session; the next current_session() opens a new pass."""
        if self._session_id is not None:
            logger.info("Closed review session %d", self._session_id)
        self._session_id = None
