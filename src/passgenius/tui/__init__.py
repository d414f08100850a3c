"""
Terminal User Interface (TUI) for PassGenius.

A generator form and two record tables (vault and archive) that share one
password store.
"""

__all__ = ["main"]


def main(settings=None):
    """Launch the PassGenius TUI."""
    from ..config import Settings
    from ..core.storage import FileStorage
    from ..core.store import PasswordStore
    from ..generation import make_generator
    from .app import PassGeniusTUI

    settings = settings or Settings.from_env()
    store = PasswordStore(FileStorage(settings.data_dir))
    app = PassGeniusTUI(store=store, generator=make_generator(settings))
    app.run()


if __name__ == "__main__":
    main()
