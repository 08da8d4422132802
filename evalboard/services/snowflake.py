"""
Snowflake connection factory - EvalBoard
evalboard/services/snowflake.py

Used by repositories via BaseRepository.get_connection(). A new connection is
opened per unit of work; nothing is shared between requests.
"""
from __future__ import annotations

import snowflake.connector

from evalboard.config import get_settings


def get_snowflake_connection() -> snowflake.connector.SnowflakeConnection:
    """Open a Snowflake connection from application settings."""
    params = {k: v for k, v in get_settings().snowflake_params.items() if v is not None}
    return snowflake.connector.connect(**params)
