"""
Misspelling Generator

Produces a plausible incorrect spelling of a word for find-the-mistake mode.
Realistic English mistakes are tried first (in random order), then generic
phonetic substitutions, then a fallback that always yields something.
"""

import logging
import random
import re
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

VOWELS = "aeiou"
CONSONANTS = "bcdfghjklmnpqrstvwxyz"

_TRIPLE_LETTERS = re.compile(r"(.)\1{2,}")

# Silent-letter clusters and what a speller writes instead (knife -> nife)
_SILENT_PATTERNS = [
    ("kn", "n"),
    ("gn", "n"),
    ("wr", "r"),
    ("mb", "m"),
    ("mn", "m"),
    ("gh", ""),
    ("ck", "k"),
]

_ABLE_ENDINGS = ["able", "ible", "eable", "abel", "uble"]

_VOWEL_SOUNDALIKES = {"a": "e", "e": "i", "i": "e", "o": "u", "u": "o"}


def preserve_capitalization(original: str, misspelled: str) -> str:
    """Apply the original word's casing (ALL CAPS, Initial or lower) to a lowercase result."""
    if original == original.upper() and original != original.lower():
        return misspelled.upper()
    if original[:1].isupper():
        return misspelled[:1].upper() + misspelled[1:]
    return misspelled


class MisspellingGenerator:
    """
    Generates misspellings that are never a sibling word or a real word.

    Args:
        word_exists: Callable answering whether a lowercase string is a real
            dictionary word. Failures are treated as "does not exist".
        rng: Random source; pass a seeded one for reproducible tests.
    """

    def __init__(self, word_exists: Optional[Callable[[str], bool]] = None,
                 rng: Optional[random.Random] = None):
        self.word_exists = word_exists
        self.rng = rng or random.Random()

    def generate(self, word: str, sibling_words: Iterable[str] = ()) -> str:
        """
        Return a misspelling of ``word`` distinct from it and from every sibling.

        Raises:
            ValueError: If ``word`` is empty.
        """
        if not word:
            raise ValueError("Cannot misspell an empty word")

        word_lower = word.lower()
        siblings = {sibling.lower() for sibling in sibling_words}

        for strategies in (self._realistic_strategies(), self._phonetic_strategies()):
            self.rng.shuffle(strategies)
            for strategy in strategies:
                candidate = strategy(word_lower)
                if candidate and self._is_acceptable(candidate, word_lower, siblings):
                    return preserve_capitalization(word, candidate)

        return preserve_capitalization(word, self._fallback(word_lower, siblings))

    def _passes_static_checks(self, candidate: str, word_lower: str, siblings) -> bool:
        if candidate == word_lower or candidate in siblings:
            return False
        return not _TRIPLE_LETTERS.search(candidate)

    def _is_acceptable(self, candidate: str, word_lower: str, siblings) -> bool:
        if not self._passes_static_checks(candidate, word_lower, siblings):
            return False
        return not self._exists(candidate)

    def _exists(self, candidate: str) -> bool:
        if self.word_exists is None:
            return False
        try:
            return bool(self.word_exists(candidate))
        except Exception as e:
            logger.warning(f"Word existence check failed for '{candidate}': {e}")
            return False

    def _fallback(self, word_lower: str, siblings) -> str:
        """
        Swap the first two letters (words over 4 letters), else double the
        last consonant, else repeat the final letter. The first form that
        passes the static checks wins; the dictionary is not consulted.
        """
        candidates = []
        if len(word_lower) > 4:
            candidates.append(word_lower[1] + word_lower[0] + word_lower[2:])
        for i in range(len(word_lower) - 1, -1, -1):
            if word_lower[i] in CONSONANTS and (i == len(word_lower) - 1 or word_lower[i] != word_lower[i + 1]):
                candidates.append(word_lower[:i + 1] + word_lower[i] + word_lower[i + 1:])
                break
        candidates.append(word_lower + word_lower[-1])

        for candidate in candidates:
            if self._passes_static_checks(candidate, word_lower, siblings):
                return candidate

        # Only reachable for inputs like "oo" or a sibling set built to block every form
        for letter in CONSONANTS + VOWELS:
            candidate = word_lower + letter
            if self._passes_static_checks(candidate, word_lower, siblings):
                return candidate
        return word_lower + "x" * 2

    # Realistic mistakes

    def _realistic_strategies(self) -> List[Callable[[str], Optional[str]]]:
        return [
            self._swap_ie_ei,
            self._drop_silent_letter,
            self._wrong_silent_letter,
            self._cious_to_shus,
            self._double_consonant,
            self._undouble_consonant,
            self._swap_oo_u,
            self._swap_c_ck,
            self._swap_eur_ure,
            self._double_wrong_consonant,
            self._swap_er_ar_or,
            self._swap_ngth_nth,
            self._swap_e_ea,
            self._swap_eed_ede,
            self._swap_aught_ought,
            self._swap_or_our,
            self._swap_able_ible,
            self._swap_oble_obel,
            self._swap_sh_sch,
            self._drop_silent_e,
            self._add_silent_e,
            self._drop_vowel,
        ]

    def _swap_ie_ei(self, w: str) -> Optional[str]:
        if "ie" in w:
            return w.replace("ie", "ei", 1)
        if "ei" in w:
            return w.replace("ei", "ie", 1)
        return None

    def _drop_silent_letter(self, w: str) -> Optional[str]:
        for pattern, replacement in _SILENT_PATTERNS:
            if pattern in w:
                return w.replace(pattern, replacement, 1)
        return None

    def _wrong_silent_letter(self, w: str) -> Optional[str]:
        if w.startswith("kn"):
            return "gn" + w[2:]
        if w.startswith("gn"):
            return "kn" + w[2:]
        if w.startswith("wr"):
            return "rh" + w[2:]
        return None

    def _cious_to_shus(self, w: str) -> Optional[str]:
        for ending in ("cious", "tious"):
            if w.endswith(ending):
                return w[:-len(ending)] + self.rng.choice(["shus", "shis"])
        return None

    def _double_consonant(self, w: str) -> Optional[str]:
        # Never doubles the first letter (cat -> catt, not ccat)
        for i in range(len(w) - 2, 0, -1):
            if w[i] in CONSONANTS and w[i] != w[i + 1]:
                return w[:i + 1] + w[i] + w[i + 1:]
        return None

    def _undouble_consonant(self, w: str) -> Optional[str]:
        for i in range(len(w) - 1):
            if w[i] == w[i + 1] and w[i] in CONSONANTS:
                return w[:i] + w[i + 1:]
        return None

    def _swap_oo_u(self, w: str) -> Optional[str]:
        if w.endswith("oon"):
            return w[:-3] + "une"
        if w.endswith("une"):
            return w[:-3] + "oon"
        if "oo" in w:
            return w.replace("oo", "u", 1)
        if "u" in w:
            return w.replace("u", "oo", 1)
        return None

    def _swap_c_ck(self, w: str) -> Optional[str]:
        for vowel in VOWELS:
            if w.endswith(vowel + "c"):
                return w + "k"
            if w.endswith(vowel + "ck"):
                return w[:-1]
        return None

    def _swap_eur_ure(self, w: str) -> Optional[str]:
        if "eur" in w:
            return w.replace("eur", "ure", 1)
        if "ure" in w:
            return w.replace("ure", "eur", 1)
        return None

    def _double_wrong_consonant(self, w: str) -> Optional[str]:
        """tomorrow -> tommorow: move the doubling to a different consonant."""
        double_pos = -1
        for i in range(len(w) - 1):
            if w[i] == w[i + 1] and w[i] in CONSONANTS:
                double_pos = i
                break
        if double_pos < 0:
            return None

        doubled = w[double_pos]
        for i in range(1, len(w)):
            if i in (double_pos, double_pos + 1):
                continue
            if (w[i] in CONSONANTS and w[i] != doubled and w[i] != w[i - 1]
                    and (i == len(w) - 1 or w[i] != w[i + 1])):
                undoubled = w[:double_pos] + w[double_pos + 1:]
                target = i - 1 if i > double_pos else i
                return undoubled[:target + 1] + undoubled[target] + undoubled[target + 1:]
        return None

    def _swap_er_ar_or(self, w: str) -> Optional[str]:
        if len(w) <= 2:
            return None
        for ending in ("ar", "er", "or"):
            if w.endswith(ending):
                others = [e for e in ("ar", "er", "or") if e != ending]
                return w[:-2] + self.rng.choice(others)
        return None

    def _swap_ngth_nth(self, w: str) -> Optional[str]:
        if "ngth" in w:
            return w.replace("ngth", "nth", 1)
        if "nth" in w:
            return w.replace("nth", "ngth", 1)
        return None

    def _swap_e_ea(self, w: str) -> Optional[str]:
        if "ea" in w:
            return w.replace("ea", "e", 1)
        e_index = w.find("e", 1)
        if 0 < e_index < len(w) - 1 and w[e_index + 1] != "a":
            return w[:e_index] + "ea" + w[e_index + 1:]
        return None

    def _swap_eed_ede(self, w: str) -> Optional[str]:
        if w.endswith("eed"):
            return w[:-3] + "ede"
        if w.endswith("ede"):
            return w[:-3] + "eed"
        return None

    def _swap_aught_ought(self, w: str) -> Optional[str]:
        if "aught" in w:
            return w.replace("aught", "ought", 1)
        if "ought" in w:
            return w.replace("ought", "aught", 1)
        return None

    def _swap_or_our(self, w: str) -> Optional[str]:
        if "our" in w:
            return w.replace("our", "or", 1)
        if "or" in w:
            return w.replace("or", "our", 1)
        return None

    def _swap_able_ible(self, w: str) -> Optional[str]:
        for ending in _ABLE_ENDINGS:
            if w.endswith(ending):
                others = [e for e in _ABLE_ENDINGS if e != ending]
                return w[:-len(ending)] + self.rng.choice(others)
        return None

    def _swap_oble_obel(self, w: str) -> Optional[str]:
        if w.endswith("oble"):
            return w[:-4] + "obel"
        if w.endswith("obel"):
            return w[:-4] + "oble"
        return None

    def _swap_sh_sch(self, w: str) -> Optional[str]:
        if "sch" in w:
            return w.replace("sch", "sh")
        if "sh" in w:
            return w.replace("sh", "sch")
        return None

    def _drop_silent_e(self, w: str) -> Optional[str]:
        if len(w) > 3 and w.endswith("e"):
            return w[:-1]
        return None

    def _add_silent_e(self, w: str) -> Optional[str]:
        if len(w) > 2 and not w.endswith("e"):
            return w + "e"
        return None

    def _drop_vowel(self, w: str) -> Optional[str]:
        # A vowel between two consonants is kept (surround -> surrund, not srround)
        for i in range(1, len(w) - 1):
            if w[i] in VOWELS:
                if w[i - 1] in CONSONANTS and w[i + 1] in CONSONANTS:
                    continue
                return w[:i] + w[i + 1:]
        return None

    # Phonetic substitutions

    def _phonetic_strategies(self) -> List[Callable[[str], Optional[str]]]:
        return [
            lambda w: w.replace("c", "k", 1) if "c" in w else None,
            lambda w: w.replace("k", "c", 1) if "k" in w else None,
            lambda w: w.replace("ph", "f", 1) if "ph" in w else None,
            lambda w: w.replace("f", "ph", 1) if "f" in w and "ph" not in w else None,
            self._double_consonant,
            self._swap_s_c,
            self._spread_o,
            self._swap_au_aw,
            self._soundalike_vowel,
        ]

    def _swap_s_c(self, w: str) -> Optional[str]:
        c_index = w.find("c")
        if self.rng.random() > 0.5 and c_index >= 0 and (c_index == 0 or w[c_index - 1] != "s"):
            return w[:c_index] + "s" + w[c_index:]
        s_index = w.find("s")
        if s_index >= 0:
            return w[:s_index] + "c" + w[s_index + 1:]
        return None

    def _spread_o(self, w: str) -> Optional[str]:
        """dog -> daug / dawg / doug"""
        for i in range(1, len(w) - 1):
            if w[i] == "o" and w[i - 1] in CONSONANTS and w[i + 1] in CONSONANTS:
                return w[:i] + self.rng.choice(["au", "aw", "ou"]) + w[i + 1:]
        return None

    def _swap_au_aw(self, w: str) -> Optional[str]:
        if "au" in w:
            return w.replace("au", "aw", 1)
        if "aw" in w:
            return w.replace("aw", "au", 1)
        return None

    def _soundalike_vowel(self, w: str) -> Optional[str]:
        for i, letter in enumerate(w):
            if letter in _VOWEL_SOUNDALIKES:
                return w[:i] + _VOWEL_SOUNDALIKES[letter] + w[i + 1:]
        return None
