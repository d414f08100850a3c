import secrets
import string
from typing import List

from .policy import PasswordPolicy, DEFAULT_POLICY, SPECIAL_CHARACTERS


class RuleBasedGenerator:
    """Random passwords drawn from the character classes a policy requires."""

    def __init__(self, length: int = 16, policy: PasswordPolicy = DEFAULT_POLICY):
        """Initialize the generator.

        Args:
            length: Length of generated passwords
            policy: Policy every generated password satisfies

        Raises:
            ValueError: If the length cannot satisfy the policy
        """
        if length < policy.min_length or length > policy.max_length:
            raise ValueError(
                f"Password length must be between {policy.min_length} and {policy.max_length} characters"
            )
        if policy.required_classes == 0:
            raise ValueError("At least one character set must be selected")
        if length < policy.required_classes:
            raise ValueError("Password length is too short for the required character sets")
        self.length = length
        self.policy = policy
        self._random = secrets.SystemRandom()

    def _pools(self) -> List[str]:
        pools = []
        if self.policy.require_upper:
            pools.append(string.ascii_uppercase)
        if self.policy.require_lower:
            pools.append(string.ascii_lowercase)
        if self.policy.require_digit:
            pools.append(string.digits)
        if self.policy.require_special:
            pools.append(SPECIAL_CHARACTERS)
        return pools

    def generate(self, topic: str) -> str:
        """Generate a password. The topic does not influence random output."""
        pools = self._pools()
        alphabet = ''.join(pools)
        # One character from each required class, the rest from the full alphabet
        chars = [self._random.choice(pool) for pool in pools]
        chars += [self._random.choice(alphabet) for _ in range(self.length - len(chars))]
        self._random.shuffle(chars)
        return ''.join(chars)
