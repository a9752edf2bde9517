"""Mini README: Session holder tracking which member is acting.

Structure:
    * SESSION_KEY - storage key of the current-user pointer.
    * SessionHolder - demo login/logout persisted next to the ledger.

There are no passwords or tokens: signing in with an email either resumes
the member already registered under that address or registers a new one,
and the admin flag is whatever the person ticked at signup. The first
login against an empty store also seeds the household ledger.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from .ledger import HouseholdLedger
from .models import User, email_local_part, parse_timestamp
from ..logging_utils import get_logger
from ..storage import KeyValueStore, load_json_record

LOGGER = get_logger(__name__)

SESSION_KEY = "currentUser"


class SessionHolder:
    """Persist the acting member under ``currentUser``."""

    def __init__(self, store: KeyValueStore, ledger: HouseholdLedger) -> None:
        self._store = store
        self._ledger = ledger

    def current_user(self) -> Optional[User]:
        """The signed-in member, or ``None`` when logged out or unreadable."""

        payload = load_json_record(self._store, SESSION_KEY)
        if not isinstance(payload, dict):
            return None
        try:
            return User.from_dict(payload)
        except (KeyError, TypeError) as error:
            LOGGER.warning("Stored session is malformed (%s); treating as logged out", error)
            return None

    def login(
        self,
        email: str,
        name: str = "",
        is_admin: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[User]:
        """Sign in or register, returning the acting member.

        Returns ``None`` without changing anything when ``email`` is blank.
        """

        email = (email or "").strip()
        if not email:
            LOGGER.debug("Login ignored: email missing")
            return None

        user = self._ledger.find_user_by_email(email)
        if user is None:
            moment = parse_timestamp(now) if now is not None else None
            user = User(
                id=self._ledger.new_user_id(moment),
                name=(name or "").strip() or email_local_part(email),
                email=email,
                is_admin=bool(is_admin),
            )
            if not self._ledger.seed_for(user, now=moment):
                self._ledger.add_user(user)
        else:
            LOGGER.debug("Resuming member %s for %s", user.id, email)

        self._store.set_item(SESSION_KEY, json.dumps(user.as_dict()))
        LOGGER.info("Signed in %s (admin=%s)", user.email, user.is_admin)
        return user

    def logout(self) -> None:
        self._store.remove_item(SESSION_KEY)
        LOGGER.info("Signed out")

