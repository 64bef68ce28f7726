"""Helpers for building database connection URLs from settings."""
from urllib.parse import quote_plus


def get_database_url(
    driver: str,
    host: str | None,
    port: int,
    user: str | None,
    password: str | None,
    name: str | None,
) -> str:
    """
    Construct an async SQLAlchemy URL from its components.

    The password is percent-encoded so credentials containing ``@`` or ``/``
    survive URL parsing.

    Example:
        >>> get_database_url("postgresql+asyncpg", "db", 5432, "assets", "p@ss", "assets")
        'postgresql+asyncpg://assets:p%40ss@db:5432/assets'
    """
    credentials = user or ""
    if password:
        credentials = f"{credentials}:{quote_plus(password)}"
    return f"{driver}://{credentials}@{host}:{port}/{name}"
