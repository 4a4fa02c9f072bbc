"""Safe Supabase query helpers."""
from typing import Any, Dict, List, Optional
import logging

from waitify.core.exceptions import NotFoundError, RemoteOperationError

logger = logging.getLogger(__name__)


async def safe_supabase_select(
    supabase,
    table_name: str,
    select_fields: str = "*",
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[str] = None,
    ascending: bool = True,
    limit: Optional[int] = None,
    required: bool = False,
) -> List[Dict[str, Any]]:
    """Safely select rows from Supabase with error handling.

    ``filters`` are applied as equality filters. With ``required`` an empty
    result raises ``NotFoundError`` instead of returning ``[]``.
    """
    try:
        query = supabase.table(table_name).select(select_fields)

        for field, value in (filters or {}).items():
            if value is not None:
                query = query.eq(field, value)
        if order_by:
            query = query.order(order_by, desc=not ascending)
        if limit is not None:
            query = query.limit(limit)

        response = query.execute()
    except Exception as e:
        logger.error(f"Database error in {table_name}: {e}")
        raise RemoteOperationError(f"Failed to load {table_name}") from e

    data = response.data or []
    if required and not data:
        raise NotFoundError(f"No {table_name} found")
    return data


async def safe_supabase_insert(supabase, table_name: str, data: dict) -> Dict[str, Any]:
    """Safely insert a row into Supabase and return it."""
    try:
        response = supabase.table(table_name).insert(data).execute()
    except Exception as e:
        logger.error(f"Insert error in {table_name}: {e}")
        raise RemoteOperationError(f"Failed to create {table_name}") from e

    if not response.data:
        raise RemoteOperationError(f"Failed to create {table_name}")
    return response.data[0]


async def safe_supabase_update(
    supabase, table_name: str, data: dict, filter_field: str, filter_value,
    filters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Safely update a row in Supabase and return the updated row.

    Extra ``filters`` narrow the match, e.g. to rows the caller owns.
    """
    try:
        query = supabase.table(table_name).update(data).eq(filter_field, filter_value)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        response = query.execute()
    except Exception as e:
        logger.error(f"Update error in {table_name}: {e}")
        raise RemoteOperationError(f"Failed to update {table_name}") from e

    if not response.data:
        raise NotFoundError(f"No {table_name} found to update")
    return response.data[0]


async def safe_supabase_delete(
    supabase, table_name: str, filter_field: str, filter_value,
    filters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Safely delete a row from Supabase and return the deleted row."""
    try:
        query = supabase.table(table_name).delete().eq(filter_field, filter_value)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        response = query.execute()
    except Exception as e:
        logger.error(f"Delete error in {table_name}: {e}")
        raise RemoteOperationError(f"Failed to delete {table_name}") from e

    if not response.data:
        raise NotFoundError(f"No {table_name} found to delete")
    return response.data[0]
