import logging

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

AUTH_STORAGE_KEY = 'isAuthenticated'


class LocalSession:
    """Local "logged in" flag kept in the same storage as the records.

    This is a convenience gate for the UI, not authentication.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def is_authenticated(self) -> bool:
        return self.storage.get(AUTH_STORAGE_KEY) == 'true'

    def login(self) -> None:
        self.storage.set(AUTH_STORAGE_KEY, 'true')
        logger.debug("Session flag set")

    def logout(self) -> None:
        self.storage.remove(AUTH_STORAGE_KEY)
        logger.debug("Session flag cleared")
