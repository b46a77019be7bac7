import random
from unittest.mock import Mock, patch

import pytest
import requests

from spelling_game.config.game_settings import DEFAULT_CLUE
from spelling_game.services.dictionary import DictionaryClient

API_ENTRY = [{
    'word': 'cat',
    'origin': 'Old English catt',
    'meanings': [{
        'partOfSpeech': 'noun',
        'definitions': [{'definition': 'A small domesticated carnivorous mammal.',
                         'example': 'The cat sat on the mat.'}],
    }],
}]


def api_response(status=200, payload=None):
    response = Mock()
    response.status_code = status
    response.json.return_value = payload if payload is not None else API_ENTRY
    return response


@pytest.fixture
def client():
    return DictionaryClient('https://dictionary.test/entries/en/', timeout=2, rng=random.Random(0))


def test_word_exists(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.return_value = api_response()
        assert client.word_exists('Cat') is True
        mock_get.assert_called_once_with('https://dictionary.test/entries/en/cat', timeout=2)


def test_unknown_word(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.return_value = api_response(status=404, payload={'title': 'No Definitions Found'})
        assert client.word_exists('catt') is False


def test_network_error_means_not_a_word(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.side_effect = requests.ConnectionError("offline")
        assert client.word_exists('cat') is False


def test_clue_uses_first_definition(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.return_value = api_response()
        assert client.fetch_clue('cat') == 'A small domesticated carnivorous mammal.'


def test_clue_falls_back_to_default(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.side_effect = requests.Timeout("slow")
        assert client.fetch_clue('cat') == DEFAULT_CLUE


def test_word_meta_from_api(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.return_value = api_response()
        meta = client.fetch_word_meta('cat')
    assert meta['example'] == 'The cat sat on the mat.'
    assert meta['part_of_speech'] == 'noun'
    assert meta['origin'] == 'Old English catt'


def test_stored_word_data_wins():
    store = Mock()
    store.get_word.return_value = {'definition': 'stored', 'sentence_example': 'My cat purrs.',
                                   'word_origin': 'Latin cattus', 'part_of_speech': 'noun'}
    client = DictionaryClient('https://dictionary.test', store=store)
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        meta = client.fetch_word_meta('cat')
        mock_get.assert_not_called()
    assert meta['definition'] == 'stored'
    assert meta['origin'] == 'Latin cattus'


def test_missing_example_uses_template(client):
    with patch('spelling_game.services.dictionary.requests.get') as mock_get:
        mock_get.side_effect = requests.ConnectionError("offline")
        meta = client.fetch_word_meta('lantern')
    assert 'lantern' in meta['example']
    assert meta['definition'] is None


def test_illustration_failure_returns_none():
    store = Mock()
    store.get_illustration.side_effect = RuntimeError("db down")
    assert DictionaryClient('https://dictionary.test', store=store).fetch_illustration('cat') is None
