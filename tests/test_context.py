"""Tests for the shared application context lifecycle."""

import atexit

from app.context import EXTENSION_KEY


class TestAppContext:

    def test_close_releases_exit_hook(self, app, monkeypatch):
        """Closing the context drops its interpreter-exit hook."""
        context = app.extensions[EXTENSION_KEY]
        released = []
        monkeypatch.setattr(atexit, "unregister", released.append)

        context.close()

        assert context.closed is True
        assert released == [context.close]

    def test_close_is_idempotent(self, app, monkeypatch):
        context = app.extensions[EXTENSION_KEY]
        released = []
        monkeypatch.setattr(atexit, "unregister", released.append)

        context.close()
        context.close()

        assert len(released) == 1
