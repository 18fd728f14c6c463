from dataclasses import dataclass, field
from typing import Optional

from common.config.env import get_env_int

DEFAULT_PORT = 1433
DEFAULT_LOGIN_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class MssqlConfig:
    """Connection settings for the SQL Server whose catalog is diagrammed."""

    host: str
    user: str
    password: str = field(repr=False)
    database: str
    port: int = DEFAULT_PORT
    login_timeout_seconds: int = DEFAULT_LOGIN_TIMEOUT_SECONDS

    @classmethod
    def from_cli(
        cls,
        host: Optional[str],
        user: Optional[str],
        password: Optional[str],
        database: Optional[str],
    ) -> "MssqlConfig":
        """Build config from CLI values, taking port and timeout defaults from the environment.

        ``MSSQL_PORT`` and ``MSSQL_LOGIN_TIMEOUT_SECS`` override the defaults.
        """
        missing = [
            name
            for name, value in {
                "ip_address": host,
                "username": user,
                "password": password,
                "initial_catalog": database,
            }.items()
            if not value
        ]
        if missing:
            missing_list = ", ".join(missing)
            raise ValueError(f"SQL Server connection missing required config: {missing_list}.")

        return cls(
            host=host,
            user=user,
            password=password,
            database=database,
            port=get_env_int("MSSQL_PORT", DEFAULT_PORT),
            login_timeout_seconds=get_env_int(
                "MSSQL_LOGIN_TIMEOUT_SECS", DEFAULT_LOGIN_TIMEOUT_SECONDS
            ),
        )
