import mongomock
import pytest

from conftest import grant_items
from spelling_game.services.storage import GameStore, _as_object_id


@pytest.fixture
def store():
    return GameStore(client=mongomock.MongoClient(), db_name='spelling_game_test')


def test_requires_uri_or_client():
    with pytest.raises(ValueError):
        GameStore()


def test_session_round_trip(store):
    session_id = store.create_session("quiz", "u1", "list1")
    assert store.update_session(session_id, {'score': 160, 'is_complete': True})

    session = store.sessions_collection.find_one({'_id': _as_object_id(session_id)})
    assert str(session['_id']) == session_id
    assert session['score'] == 160
    assert session['is_complete'] is True
    assert session['game_mode'] == "quiz"


def test_update_unknown_session(store):
    assert store.update_session("not-an-id", {'score': 1}) is False


def test_use_item_is_conditional(store):
    assert store.use_item("u1", "do_over") is False

    grant_items(store, "u1", "do_over", 1)
    assert store.get_item_count("u1", "do_over") == 1
    assert store.use_item("u1", "do_over") is True
    assert store.use_item("u1", "do_over") is False
    assert store.get_item_count("u1", "do_over") == 0


def test_achievement_upsert(store):
    assert store.get_achievement("u1", "list1", "Word List Mastery") is None
    store.upsert_achievement("u1", "list1", "Word List Mastery", "1 Star", ["quiz"])
    store.upsert_achievement("u1", "list1", "Word List Mastery", "2 Stars", ["quiz", "timed"])

    achievement = store.get_achievement("u1", "list1", "Word List Mastery")
    assert achievement['achievement_value'] == "2 Stars"
    assert achievement['completed_modes'] == ["quiz", "timed"]
    assert store.achievements_collection.count_documents({}) == 1


def test_leaderboard_entries(store):
    entry_id = store.create_leaderboard_score(score=300, accuracy=90, game_mode="timed",
                                              user_id="u2", session_id="s2")

    entry = store.leaderboard_collection.find_one({'_id': _as_object_id(entry_id)})
    assert entry['score'] == 300
    assert entry['accuracy'] == 90
    assert entry['game_mode'] == "timed"
    assert entry['session_id'] == "s2"
    assert 'created_at' in entry


def test_word_list_lookup(store):
    list_id = store.word_lists_collection.insert_one({'name': 'Week 1', 'words': ['cat', 'dog']}).inserted_id
    word_list = store.get_word_list(str(list_id))
    assert word_list['words'] == ['cat', 'dog']
    assert store.get_word_list("missing") is None


def test_word_and_illustration_lookup(store):
    store.words_collection.insert_one({'text': 'cat', 'definition': 'a small pet'})
    store.illustrations_collection.insert_one({'word': 'cat', 'image_path': '/img/cat.png'})

    assert store.get_word("Cat")['definition'] == 'a small pet'
    assert store.get_illustration("CAT") == '/img/cat.png'
    assert store.get_illustration("dog") is None
