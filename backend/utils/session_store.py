"""
Session storage for EduVision.

Each feature keeps its last result per session under
``{feature}_data_{user_id}_{session_id}``; the per-user session list lives
under ``eduVision_history_{user_id}``. Values are JSON strings.

Redis is used when REDIS_URL is set and reachable, otherwise an in-memory
dict. Backend errors are logged and never propagate to callers: a failed
read returns None and a failed write is dropped.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import redis.asyncio as redis

from backend.models import HistoryItem, HistoryType
from configs import REDIS_URL

logger = logging.getLogger("eduvision.sessions")

# Feature prefixes that own per-session blobs
SESSION_FEATURES = ("exam", "notebook", "prof", "solver", "sheet", "cam")


def result_key(feature: str, user_id: str, session_id: str) -> str:
    return f"{feature}_data_{user_id}_{session_id}"


def history_key(user_id: str) -> str:
    return f"eduVision_history_{user_id}"


class SessionStore:
    """
    Per-user session history and last results of each feature.

    Values are JSON blobs keyed by feature prefix + user id + session id.
    Redis backend when a URL is configured, in-memory dict otherwise.
    """
    def __init__(self, redis_url: Optional[str] = REDIS_URL):
        self.redis_url = redis_url
        self.redis_client = None
        self.memory_store: Dict[str, str] = {}
        self.use_redis = False
        self._initialized = False

    async def initialize(self):
        """Connect to Redis if configured."""
        if self._initialized:
            return

        if self.redis_url:
            try:
                self.redis_client = redis.from_url(self.redis_url, decode_responses=True)
                await self.redis_client.ping()
                self.use_redis = True
                logger.info("Session store connected to Redis")
            except Exception as e:
                logger.warning(f"Redis connection failed (falling back to memory): {e}")
                self.use_redis = False
                self.redis_client = None
        else:
            logger.info("No REDIS_URL found. Using in-memory session store.")

        self._initialized = True

    async def _get(self, key: str) -> Optional[str]:
        if not self._initialized:
            await self.initialize()
        try:
            if self.use_redis:
                return await self.redis_client.get(key)
            return self.memory_store.get(key)
        except Exception as e:
            logger.warning(f"Session GET error: {e}")
            return None

    async def _set(self, key: str, value: str):
        if not self._initialized:
            await self.initialize()
        try:
            if self.use_redis:
                await self.redis_client.set(key, value)
            else:
                self.memory_store[key] = value
        except Exception as e:
            logger.warning(f"Session SET error: {e}")

    async def _delete(self, *keys: str):
        if not self._initialized:
            await self.initialize()
        try:
            if self.use_redis:
                await self.redis_client.delete(*keys)
            else:
                for key in keys:
                    self.memory_store.pop(key, None)
        except Exception as e:
            logger.warning(f"Session DELETE error: {e}")

    # --- feature results -------------------------------------------------

    async def save_result(self, feature: str, user_id: str, session_id: str, data: Any):
        if feature not in SESSION_FEATURES:
            raise ValueError(f"Unknown feature: {feature}")
        await self._set(result_key(feature, user_id, session_id), json.dumps(data, default=str))

    async def load_result(self, feature: str, user_id: str, session_id: str) -> Optional[Any]:
        raw = await self._get(result_key(feature, user_id, session_id))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt %s blob for session %s", feature, session_id)
            return None

    # --- history ---------------------------------------------------------

    async def get_history(self, user_id: str) -> List[HistoryItem]:
        raw = await self._get(history_key(user_id))
        if not raw:
            return []
        try:
            return [HistoryItem.model_validate(item) for item in json.loads(raw)]
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Corrupt history for {user_id}: {e}")
            return []

    async def _put_history(self, user_id: str, items: List[HistoryItem]):
        payload = json.dumps([item.model_dump(mode="json", by_alias=True) for item in items])
        await self._set(history_key(user_id), payload)

    async def upsert_history(
        self, user_id: str, session_id: str, title: str, type: HistoryType
    ) -> List[HistoryItem]:
        """Retitle an existing session (bumping its timestamp) or prepend a new one."""
        now = int(time.time() * 1000)
        items = await self.get_history(user_id)
        for item in items:
            if item.id == session_id:
                item.title = title
                item.timestamp = now
                break
        else:
            items.insert(0, HistoryItem(id=session_id, title=title, timestamp=now, type=type))
        await self._put_history(user_id, items)
        return items

    async def delete_session(self, user_id: str, session_id: str) -> List[HistoryItem]:
        """Drop a session from history along with every feature blob it owns."""
        items = [i for i in await self.get_history(user_id) if i.id != session_id]
        await self._put_history(user_id, items)
        await self._delete(*(result_key(f, user_id, session_id) for f in SESSION_FEATURES))
        return items

    async def clear(self):
        if self.use_redis and self.redis_client:
            await self.redis_client.flushdb()
        self.memory_store.clear()


def new_session_id() -> str:
    return str(int(time.time() * 1000))
