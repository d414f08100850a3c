import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol

from ..core.models import PasswordRecord
from .policy import GenerationError

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Password generated successfully."
VALIDATION_MESSAGE = "Validation failed"
UNEXPECTED_MESSAGE = "An unexpected error occurred."


class PasswordGenerator(Protocol):
    def generate(self, topic: str) -> str:
        ...


@dataclass
class ActionResult:
    message: str
    errors: Optional[Dict[str, List[str]]] = None
    password: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.password is not None


def validate_username(username: Optional[str]) -> Dict[str, List[str]]:
    """Per-field validation errors for the generate form."""
    if not username or not username.strip():
        return {'username': ["Username is required."]}
    return {}


def generate_password_action(username: Optional[str], generator: PasswordGenerator) -> ActionResult:
    """Validate the form, then ask the generator for a password.

    Never raises: failures are reported through the returned result.
    """
    errors = validate_username(username)
    if errors:
        return ActionResult(message=VALIDATION_MESSAGE, errors=errors)

    try:
        password = generator.generate(username.strip())
    except GenerationError as e:
        logger.error(f"Password generation failed: {e}")
        return ActionResult(message=UNEXPECTED_MESSAGE)
    except Exception:
        logger.exception("Unexpected error during password generation")
        return ActionResult(message=UNEXPECTED_MESSAGE)

    return ActionResult(message=SUCCESS_MESSAGE, password=password)


def new_record(
    username: str,
    password: str,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> PasswordRecord:
    """Build a fresh record for a generated password."""
    return PasswordRecord(
        id=id_factory(),
        username=username,
        password=password,
        date=clock(),
    )
