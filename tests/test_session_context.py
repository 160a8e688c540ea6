import pytest

from session_context import SessionContext, SessionEvent


def test_logout_notifies_subscribers_and_clears_token():
    ctx = SessionContext(token="abc")
    events = []
    ctx.subscribe(events.append)

    ctx.logout("token expired")

    assert not ctx.is_authenticated
    assert events == [SessionEvent("logout", "token expired")]


def test_unsubscribe_stops_delivery_and_is_idempotent():
    ctx = SessionContext(token="abc")
    events = []
    unsubscribe = ctx.subscribe(events.append)
    unsubscribe()
    unsubscribe()

    ctx.logout()
    assert events == []


def test_theme_changes_are_published_once():
    ctx = SessionContext()
    events = []
    ctx.subscribe(events.append)

    ctx.set_theme("dtao")
    ctx.set_theme("dtao")

    assert ctx.theme == "dtao"
    assert events == [SessionEvent("theme", "dtao")]


def test_unknown_theme_is_rejected():
    with pytest.raises(ValueError):
        SessionContext(theme="neon")
    with pytest.raises(ValueError):
        SessionContext().set_theme("neon")


def test_failing_listener_does_not_block_others():
    ctx = SessionContext(token="abc")
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    ctx.subscribe(broken)
    ctx.subscribe(seen.append)
    ctx.logout()

    assert [e.kind for e in seen] == ["logout"]


def test_contexts_are_independent():
    first, second = SessionContext(token="a"), SessionContext(token="b")
    first.logout()
    assert second.is_authenticated
