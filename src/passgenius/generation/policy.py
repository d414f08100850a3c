import string
from dataclasses import dataclass
from typing import List, Optional

SPECIAL_CHARACTERS = "!@#$%^&*()-_=+[]{};:,.?/"


class GenerationError(Exception):
    """Raised when a generator cannot produce an acceptable password."""
    pass


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 8
    max_length: int = 128
    require_upper: bool = True
    require_lower: bool = True
    require_digit: bool = True
    require_special: bool = True

    @property
    def required_classes(self) -> int:
        return sum((self.require_upper, self.require_lower, self.require_digit, self.require_special))

    def violations(self, password: str, topic: Optional[str] = None) -> List[str]:
        """List every way the password breaks this policy (empty when it complies)."""
        problems: List[str] = []
        if len(password) < self.min_length:
            problems.append(f"must be at least {self.min_length} characters")
        if len(password) > self.max_length:
            problems.append(f"must be at most {self.max_length} characters")
        if self.require_upper and not any(c in string.ascii_uppercase for c in password):
            problems.append("must contain an uppercase letter")
        if self.require_lower and not any(c in string.ascii_lowercase for c in password):
            problems.append("must contain a lowercase letter")
        if self.require_digit and not any(c in string.digits for c in password):
            problems.append("must contain a digit")
        if self.require_special and not any(
            not c.isalnum() and not c.isspace() for c in password
        ):
            problems.append("must contain a special character")
        if topic and topic.strip() and topic.strip().lower() in password.lower():
            problems.append("must not contain the topic")
        return problems

    def check(self, password: str, topic: Optional[str] = None) -> str:
        """Return the password unchanged, or raise GenerationError."""
        problems = self.violations(password, topic)
        if problems:
            raise GenerationError(f"Generated password {'; '.join(problems)}")
        return password


# 2-3 word phrases such as "HappyDolphin!8"
MEMORABLE_POLICY = PasswordPolicy(min_length=12, max_length=16)

DEFAULT_POLICY = PasswordPolicy()
