"""
Game Store

MongoDB persistence for sessions, leaderboard scores, achievements, Star Shop
inventory and word data. Callers treat every method as fallible; the session
lifecycle and inventory log and continue on errors.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

logger = logging.getLogger(__name__)


def _as_object_id(value: str):
    """Ids created by this store are ObjectIds; anything else is matched as given."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return value


class GameStore:
    """
    Store for everything a game reads or writes outside its own memory.

    Args:
        mongo_uri: MongoDB connection string. Ignored when ``client`` is given.
        db_name: Database name.
        client: An existing client (tests pass a mongomock client).
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = 'spelling_game', client=None):
        if client is None:
            if not mongo_uri:
                raise ValueError("A MongoDB URI or client is required")
            client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            try:
                client.admin.command('ping')
                logger.info("Successfully connected to MongoDB")
            except Exception as e:
                logger.error(f"MongoDB connection error: {e}")
                raise

        self.client = client
        self.db = client[db_name]
        self.sessions_collection = self.db.game_sessions
        self.leaderboard_collection = self.db.leaderboard_scores
        self.achievements_collection = self.db.achievements
        self.items_collection = self.db.user_items
        self.word_lists_collection = self.db.word_lists
        self.words_collection = self.db.words
        self.illustrations_collection = self.db.word_illustrations

        self.sessions_collection.create_index("user_id")
        self.leaderboard_collection.create_index([("game_mode", 1), ("score", -1)])
        self.achievements_collection.create_index(
            [("user_id", 1), ("list_id", 1), ("achievement_type", 1)], unique=True
        )
        self.items_collection.create_index([("user_id", 1), ("item_id", 1)], unique=True)
        self.words_collection.create_index("text")
        self.illustrations_collection.create_index("word")

    # Sessions

    def create_session(self, game_mode: str, user_id: str, list_id: Optional[str]) -> str:
        now = datetime.now(timezone.utc)
        result = self.sessions_collection.insert_one({
            "user_id": user_id,
            "list_id": list_id,
            "game_mode": game_mode,
            "score": 0,
            "total_words": 0,
            "correct_words": 0,
            "best_streak": 0,
            "incorrect_words": [],
            "is_complete": False,
            "stars_earned": 0,
            "created_at": now,
            "completed_at": None,
        })
        return str(result.inserted_id)

    def update_session(self, session_id: str, fields: Dict[str, Any]) -> bool:
        result = self.sessions_collection.update_one({"_id": _as_object_id(session_id)}, {"$set": fields})
        return result.matched_count == 1

    # Leaderboard

    def create_leaderboard_score(self, score: int, accuracy: int, game_mode: str,
                                 user_id: str, session_id: Optional[str]) -> str:
        result = self.leaderboard_collection.insert_one({
            "user_id": user_id,
            "session_id": session_id,
            "game_mode": game_mode,
            "score": score,
            "accuracy": accuracy,
            "created_at": datetime.now(timezone.utc),
        })
        return str(result.inserted_id)

    # Achievements

    def get_achievement(self, user_id: str, list_id: str, achievement_type: str) -> Optional[Dict[str, Any]]:
        return self.achievements_collection.find_one({
            "user_id": user_id,
            "list_id": list_id,
            "achievement_type": achievement_type,
        })

    def upsert_achievement(self, user_id: str, list_id: str, achievement_type: str,
                           achievement_value: str, completed_modes: List[str]) -> None:
        self.achievements_collection.update_one(
            {"user_id": user_id, "list_id": list_id, "achievement_type": achievement_type},
            {"$set": {
                "achievement_value": achievement_value,
                "completed_modes": completed_modes,
                "updated_at": datetime.now(timezone.utc),
            }},
            upsert=True,
        )

    # Star Shop inventory

    def get_item_count(self, user_id: str, item_id: str) -> int:
        doc = self.items_collection.find_one({"user_id": user_id, "item_id": item_id})
        return int(doc.get("quantity", 0)) if doc else 0

    def use_item(self, user_id: str, item_id: str, quantity: int = 1) -> bool:
        """Decrement only if enough items are held. Returns whether the decrement happened."""
        doc = self.items_collection.find_one_and_update(
            {"user_id": user_id, "item_id": item_id, "quantity": {"$gte": quantity}},
            {"$inc": {"quantity": -quantity}},
            return_document=ReturnDocument.AFTER,
        )
        return doc is not None

    # Words

    def get_word_list(self, list_id: str) -> Optional[Dict[str, Any]]:
        doc = self.word_lists_collection.find_one({"_id": _as_object_id(list_id)})
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    def get_word(self, text: str) -> Optional[Dict[str, Any]]:
        return self.words_collection.find_one({"text": text.lower()})

    def get_illustration(self, word: str) -> Optional[str]:
        doc = self.illustrations_collection.find_one({"word": word.lower()})
        return doc.get("image_path") if doc else None
