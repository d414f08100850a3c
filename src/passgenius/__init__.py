# Avoid importing heavy submodules at top-level to prevent side effects
__all__ = ["PasswordStore", "PasswordRecord", "ArchivedPasswordRecord"]

__version__ = "0.1.0"


def __getattr__(name):
    if name == "PasswordStore":
        from .core.store import PasswordStore
        return PasswordStore
    if name == "PasswordRecord":
        from .core.models import PasswordRecord
        return PasswordRecord
    if name == "ArchivedPasswordRecord":
        from .core.models import ArchivedPasswordRecord
        return ArchivedPasswordRecord
    raise AttributeError(name)
