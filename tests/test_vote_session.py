import json

from app.services.vote_session import (
    ANONYMOUS_ID_FILE,
    VOTE_CACHE_FILE,
    AnonymousIdStore,
    open_vote_session,
)
from app.storage.vote_cache import VoteCache


def test_anonymous_id_is_created_once_and_reused(data_dir):
    first = AnonymousIdStore(data_dir / ANONYMOUS_ID_FILE).get_or_create()
    second = AnonymousIdStore(data_dir / ANONYMOUS_ID_FILE).get_or_create()

    assert first
    assert first == second
    assert json.loads((data_dir / ANONYMOUS_ID_FILE).read_text()) == {"user_id": first}


def test_corrupt_anonymous_id_file_is_replaced(data_dir):
    (data_dir / ANONYMOUS_ID_FILE).write_text("garbage", encoding="utf-8")
    user_id = AnonymousIdStore(data_dir / ANONYMOUS_ID_FILE).get_or_create()
    assert json.loads((data_dir / ANONYMOUS_ID_FILE).read_text()) == {"user_id": user_id}


def test_vote_cache_upserts_and_persists(data_dir):
    cache = VoteCache(data_dir / VOTE_CACHE_FILE)
    assert cache.get_item("app-1") is None

    cache.update_item("app-1", count=4, loved=True)
    cache.update_item("app-1", count=5)

    reloaded = VoteCache(data_dir / VOTE_CACHE_FILE)
    state = reloaded.get_item("app-1")
    assert (state.count, state.loved) == (5, True)


def test_vote_cache_returns_copies(data_dir):
    cache = VoteCache(data_dir / VOTE_CACHE_FILE)
    cache.update_item("x", count=1, loved=False)
    cache.get_item("x").count = 99
    assert cache.get_item("x").count == 1


def test_vote_cache_skips_malformed_entries(data_dir):
    (data_dir / VOTE_CACHE_FILE).write_text(
        json.dumps({"good": {"count": 2, "loved": True}, "bad": {"count": "many"}}),
        encoding="utf-8",
    )
    cache = VoteCache(data_dir / VOTE_CACHE_FILE)
    assert cache.get_item("good").count == 2
    assert cache.get_item("bad") is None


def test_open_vote_session_shares_one_user_id(data_dir):
    first = open_vote_session(data_dir)
    second = open_vote_session(data_dir)
    assert first.user_id == second.user_id
    assert first.cache.path == data_dir / VOTE_CACHE_FILE


def test_dependencies_share_one_session_and_client(data_dir, monkeypatch):
    from app.core import dependencies

    monkeypatch.setenv(dependencies.DATA_ROOT_ENV_VAR, str(data_dir))
    monkeypatch.setenv("VOTE_API_URL", "http://votes.test")
    monkeypatch.setattr(dependencies, "_settings", None)
    monkeypatch.setattr(dependencies, "_vote_session", None)
    monkeypatch.setattr(dependencies, "_vote_client", None)

    session = dependencies.get_vote_session()
    assert dependencies.get_vote_session() is session
    assert session.cache.path == data_dir / VOTE_CACHE_FILE
    assert dependencies.get_vote_client() is dependencies.get_vote_client()
    assert dependencies.get_vote_client().http.base_url.host == "votes.test"
