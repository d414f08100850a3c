"""Password generation for PassGenius.

Two generators share the PasswordGenerator protocol: a rule-based random
generator and a Gemini-backed memorable phrase generator. The generate action
validates form input and wraps either of them.
"""

from typing import Optional

from ..config import Settings
from .policy import PasswordPolicy, GenerationError, DEFAULT_POLICY, MEMORABLE_POLICY
from .rules import RuleBasedGenerator
from .actions import (
    ActionResult,
    PasswordGenerator,
    generate_password_action,
    new_record,
    validate_username,
)


def make_generator(settings: Settings, kind: Optional[str] = None) -> PasswordGenerator:
    """Build the generator named by ``kind`` (defaults to the configured one)."""
    kind = kind or settings.generator
    if kind == "ai":
        # Imported lazily so the rule-based path works without the Gemini SDK loaded
        from .memorable import MemorableGenerator
        return MemorableGenerator(api_key=settings.gemini_api_key, model=settings.gemini_model)
    if kind == "rules":
        return RuleBasedGenerator(length=settings.password_length)
    raise ValueError(f"Unknown generator: {kind}")


__all__ = [
    'PasswordPolicy',
    'GenerationError',
    'DEFAULT_POLICY',
    'MEMORABLE_POLICY',
    'RuleBasedGenerator',
    'ActionResult',
    'PasswordGenerator',
    'generate_password_action',
    'new_record',
    'validate_username',
    'make_generator',
]
