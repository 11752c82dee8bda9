"""
Environment-based configuration.

Settings are read once from the process environment when the application
container is built and are immutable afterwards.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .utils.errors import AppError, ErrorCode

LOCAL = "local"
SANDBOX = "sandbox"
PROD = "prod"

DEV_AUTH_SECRET = "dev-secret-key-for-development"


@dataclass(frozen=True)
class EnvironmentConfig:
    """Named deployment target (base API URL and callback URL)."""

    name: str
    api_url: str
    clients_api_url: str
    app_url: str
    description: str


ENVIRONMENTS: Dict[str, EnvironmentConfig] = {
    LOCAL: EnvironmentConfig(
        name="Local Development",
        api_url="https://m4ijnyg5da.execute-api.us-east-1.amazonaws.com/sandbox",
        clients_api_url="https://mkrc6lo043.execute-api.us-east-1.amazonaws.com/sandbox",
        app_url="http://localhost:3000",
        description="Local development environment",
    ),
    SANDBOX: EnvironmentConfig(
        name="Sandbox",
        api_url="https://m4ijnyg5da.execute-api.us-east-1.amazonaws.com/sandbox",
        clients_api_url="https://mkrc6lo043.execute-api.us-east-1.amazonaws.com/sandbox",
        app_url="https://sandbox.d3ts6pwgn7uyyh.amplifyapp.com",
        description="Testing and development environment",
    ),
    PROD: EnvironmentConfig(
        name="Production",
        api_url="https://9o43ckvise.execute-api.us-east-1.amazonaws.com/prod",
        clients_api_url="https://mkrc6lo043.execute-api.us-east-1.amazonaws.com/prod",
        app_url="https://production.d3ts6pwgn7uyyh.amplifyapp.com",
        description="Production environment",
    ),
}


def get_environment_config(environment: Optional[str]) -> EnvironmentConfig:
    """Get the named config for an environment, falling back to local."""
    if environment and environment in ENVIRONMENTS:
        return ENVIRONMENTS[environment]
    return ENVIRONMENTS[LOCAL]


@dataclass(frozen=True)
class TableNames:
    """DynamoDB table names, one per entity."""

    users: str
    products: str
    providers: str
    logos: str

    @classmethod
    def for_environment(cls, environment: str, env: Dict[str, str]) -> "TableNames":
        def name(entity: str, variable: str) -> str:
            return env.get(variable) or f"onpoint-admin-{entity}-{environment}"

        return cls(
            users=name("users", "DYNAMODB_USERS_TABLE"),
            products=name("products", "DYNAMODB_PRODUCTS_TABLE"),
            providers=name("providers", "DYNAMODB_PROVIDERS_TABLE"),
            logos=name("logos", "DYNAMODB_LOGOS_TABLE"),
        )


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    environment: str
    region: str
    tables: TableNames
    auth_secret: str
    auth_issuer: str
    auth_provider: str
    auth_default_role: str = "ejecutivo"
    session_ttl_seconds: int = 24 * 60 * 60
    access_key_id: Optional[str] = field(default=None, repr=False)
    secret_access_key: Optional[str] = field(default=None, repr=False)
    endpoint_url: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == PROD

    @property
    def environment_config(self) -> EnvironmentConfig:
        return get_environment_config(self.environment)

    @property
    def has_explicit_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Raises:
            AppError: If production is missing required auth settings
        """
        env = dict(os.environ if env is None else env)

        environment = env.get("APP_ENVIRONMENT", LOCAL)
        if environment not in ENVIRONMENTS:
            environment = LOCAL
        is_production = environment == PROD

        auth_secret = env.get("AUTH_SECRET", "")
        if not auth_secret:
            if is_production:
                raise AppError(
                    ErrorCode.CONFIGURATION_ERROR, "AUTH_SECRET must be set in production"
                )
            auth_secret = DEV_AUTH_SECRET

        auth_provider = env.get("AUTH_PROVIDER") or ("store" if is_production else "dev")
        if auth_provider not in ("dev", "store"):
            raise AppError(
                ErrorCode.CONFIGURATION_ERROR,
                f"Unknown AUTH_PROVIDER '{auth_provider}' (expected 'dev' or 'store')",
            )
        if auth_provider == "dev" and is_production:
            raise AppError(
                ErrorCode.CONFIGURATION_ERROR,
                "The development credentials provider cannot run in production",
            )

        return cls(
            environment=environment,
            region=env.get("DYNAMODB_REGION") or env.get("AWS_REGION") or "us-east-1",
            tables=TableNames.for_environment(environment, env),
            auth_secret=auth_secret,
            auth_issuer=env.get("AUTH_ISSUER") or get_environment_config(environment).app_url,
            auth_provider=auth_provider,
            auth_default_role=env.get("AUTH_DEFAULT_ROLE", "ejecutivo"),
            session_ttl_seconds=int(env.get("SESSION_TTL_SECONDS", str(24 * 60 * 60))),
            access_key_id=env.get("DYNAMODB_ACCESS_KEY_ID") or None,
            secret_access_key=env.get("DYNAMODB_SECRET_ACCESS_KEY") or None,
            endpoint_url=env.get("DYNAMODB_ENDPOINT") or None,
        )
