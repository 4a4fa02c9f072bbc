"""Supabase and redis client configuration."""
from typing import Optional
import logging

import redis
from supabase import Client, create_client

from waitify.config.settings import settings

# Global client instances
_supabase_client: Optional[Client] = None
_supabase_service_client: Optional[Client] = None
_redis_client: Optional[redis.Redis] = None

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client:
    """
    Get Supabase client for user-authenticated requests.
    This client uses the anon key and relies on row level security.
    """
    global _supabase_client

    if _supabase_client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise ValueError("Supabase credentials missing in .env file")

        try:
            _supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
            logger.info("Supabase client (anon) initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise

    return _supabase_client


def get_supabase_service_client() -> Optional[Client]:
    """
    Get Supabase client with service role for admin operations.
    This bypasses RLS and should only be used for system operations.
    """
    global _supabase_service_client

    if _supabase_service_client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.warning("Service role key not available - some admin operations may not work")
            return None

        try:
            _supabase_service_client = create_client(
                settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
            )
            logger.info("Supabase service client initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase service client: {e}")
            return None

    return _supabase_service_client


def get_redis_client() -> redis.Redis:
    """Get the shared redis client used for floor plan storage."""
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5.0,
            health_check_interval=30,
        )
        logger.info("Redis client initialized for %s", settings.REDIS_URL)

    return _redis_client
