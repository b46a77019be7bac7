"""
Dictionary Client

Word existence checks for the misspelling generator, word metadata for the
feedback screen, and crossword clues. All lookups are best-effort: a failed
request is logged and answered with a fallback value.
"""

import logging
import random
from typing import Any, Dict, Optional

import requests

from ..config.game_settings import DEFAULT_CLUE, FALLBACK_EXAMPLE_TEMPLATES

logger = logging.getLogger(__name__)


class DictionaryClient:
    """Free Dictionary API client backed by the store's ``words`` collection."""

    def __init__(self, api_url: str, timeout: float = 5, store=None, rng: Optional[random.Random] = None):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.store = store
        self.rng = rng or random.Random()

    def _lookup(self, word: str) -> Optional[list]:
        """Raw API entries for ``word``, or None when the word is unknown or the request failed."""
        try:
            response = requests.get(f"{self.api_url}/{word.lower()}", timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Dictionary lookup failed for '{word}': {e}")
            return None
        if response.status_code != 200:
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Dictionary returned invalid JSON for '{word}'")
            return None
        return data if isinstance(data, list) and data else None

    def word_exists(self, word: str) -> bool:
        return self._lookup(word) is not None

    def fetch_clue(self, word: str) -> str:
        """First definition of the word, or the default clue."""
        entries = self._lookup(word)
        definition = self._first(entries, 'definition')
        return definition or DEFAULT_CLUE

    def fetch_word_meta(self, word: str) -> Dict[str, Any]:
        """
        Definition, example sentence, origin and part of speech.

        Stored word data wins over the API. A missing example sentence is
        replaced by a template sentence so the feedback screen always has one.
        """
        meta = {'word': word, 'definition': None, 'example': None, 'origin': None, 'part_of_speech': None}

        stored = None
        if self.store is not None:
            try:
                stored = self.store.get_word(word)
            except Exception as e:
                logger.warning(f"Failed to read stored data for '{word}': {e}")
        if stored:
            meta['definition'] = stored.get('definition')
            meta['example'] = stored.get('sentence_example')
            meta['origin'] = stored.get('word_origin')
            meta['part_of_speech'] = stored.get('part_of_speech')

        if not meta['definition'] or not meta['example']:
            entries = self._lookup(word)
            meta['definition'] = meta['definition'] or self._first(entries, 'definition')
            meta['example'] = meta['example'] or self._first(entries, 'example')
            meta['part_of_speech'] = meta['part_of_speech'] or self._first_part_of_speech(entries)
            if entries and not meta['origin']:
                meta['origin'] = entries[0].get('origin')

        if not meta['example']:
            meta['example'] = self.rng.choice(FALLBACK_EXAMPLE_TEMPLATES).format(word=word)
        return meta

    def fetch_illustration(self, word: str) -> Optional[str]:
        if self.store is None:
            return None
        try:
            return self.store.get_illustration(word)
        except Exception as e:
            logger.warning(f"Failed to fetch illustration for '{word}': {e}")
            return None

    @staticmethod
    def _first(entries: Optional[list], key: str) -> Optional[str]:
        for entry in entries or []:
            for meaning in entry.get('meanings', []):
                for definition in meaning.get('definitions', []):
                    if definition.get(key):
                        return definition[key]
        return None

    @staticmethod
    def _first_part_of_speech(entries: Optional[list]) -> Optional[str]:
        for entry in entries or []:
            for meaning in entry.get('meanings', []):
                if meaning.get('partOfSpeech'):
                    return meaning['partOfSpeech']
        return None
