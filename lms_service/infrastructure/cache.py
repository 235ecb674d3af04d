import json
import redis
from typing import Optional, Any
from ..config import settings
from .metrics import cache_hits_total, cache_misses_total

_redis_client: Optional[redis.Redis] = None

COURSES_LIST_PATTERN = "courses:list:*"


def course_key(course_id: int) -> str:
    return f"course:{course_id}"


def courses_list_key(params: dict) -> str:
    parts = [f"{k}={v}" for k, v in sorted(params.items()) if v is not None]
    return "courses:list:" + "&".join(parts)


def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
    return _redis_client

def get_cache(key: str) -> Optional[Any]:
    """Получить значение из кэша"""
    if not settings.CACHE_ENABLED:
        return None
    try:
        client = get_redis()
        value = client.get(key)
        if value:
            cache_hits_total.inc()
            return json.loads(value)
    except (redis.RedisError, ValueError):
        # Если Redis недоступен, просто идём в БД
        pass
    cache_misses_total.inc()
    return None

def set_cache(key: str, value: Any, ttl: int = None) -> bool:
    """Сохранить значение в кэш"""
    if not settings.CACHE_ENABLED:
        return False
    try:
        client = get_redis()
        ttl = ttl or settings.CACHE_TTL
        client.setex(key, ttl, json.dumps(value, ensure_ascii=False, default=str))
        return True
    except (redis.RedisError, TypeError):
        return False

def delete_cache(key: str) -> bool:
    """Удалить значение из кэша"""
    if not settings.CACHE_ENABLED:
        return False
    try:
        client = get_redis()
        client.delete(key)
        return True
    except redis.RedisError:
        return False

def delete_cache_pattern(pattern: str) -> int:
    """Удалить все ключи по паттерну"""
    if not settings.CACHE_ENABLED:
        return 0
    try:
        client = get_redis()
        keys = list(client.scan_iter(match=pattern))
        if keys:
            return client.delete(*keys)
        return 0
    except redis.RedisError:
        return 0

def invalidate_course(course_id: int) -> None:
    """Счётчики курса изменились: сбрасываем карточку и все листинги"""
    delete_cache(course_key(course_id))
    delete_cache_pattern(COURSES_LIST_PATTERN)
