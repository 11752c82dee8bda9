"""
Application container and request entry point.

The container is built explicitly (normally once per Lambda cold start)
from `Settings`: one DynamoDB resource, one repository per entity and the
credentials provider. Handlers receive it as an argument.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .config import Settings
from .handlers import auth, debug, logos, products, providers, stats, tags, users
from .repositories.logos import LogoRepository
from .repositories.products import ProductRepository
from .repositories.providers import ProviderRepository
from .repositories.users import UserRepository
from .router import Router
from .utils.api_types import ApiGatewayEvent, Request
from .utils.auth import (
    CredentialsProvider,
    SessionClaims,
    create_credentials_provider,
    verify_session_token,
)
from .utils.dynamodb import DynamoDBStore
from .utils.errors import AppError
from .utils.logging import get_correlation_id, get_logger
from .utils.responses import ApiGatewayResponse, ApiResult

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBServiceResource

logger = get_logger(__name__)


def build_router() -> Router:
    return Router(
        [
            *auth.ROUTES,
            *stats.ROUTES,
            *tags.ROUTES,
            *products.ROUTES,
            *providers.ROUTES,
            *users.ROUTES,
            *logos.ROUTES,
            *debug.ROUTES,
        ]
    )


@dataclass
class Application:
    """Services shared by every request; read-only after construction."""

    settings: Settings
    store: DynamoDBStore
    users: UserRepository
    products: ProductRepository
    providers: ProviderRepository
    logos: LogoRepository
    credentials: CredentialsProvider
    router: Router

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        resource: Optional["DynamoDBServiceResource"] = None,
    ) -> "Application":
        """
        Build the container.

        Args:
            settings: Settings to use (defaults to reading the environment)
            resource: Pre-built DynamoDB resource (tests, LocalStack)
        """
        settings = settings or Settings.from_env()
        store = DynamoDBStore(settings, resource)
        users = UserRepository(store.users)
        app = cls(
            settings=settings,
            store=store,
            users=users,
            products=ProductRepository(store.products),
            providers=ProviderRepository(store.providers),
            logos=LogoRepository(store.logos),
            credentials=create_credentials_provider(settings, users),
            router=build_router(),
        )
        logger.info(
            "Application initialized",
            environment=settings.environment,
            region=settings.region,
            authProvider=app.credentials.name,
        )
        return app

    def session(self, request: Request) -> Optional[SessionClaims]:
        """
        Claims of the request's session, or None when it carries no token.

        Raises:
            AppError: UNAUTHORIZED when a token is present but invalid
        """
        token = request.session_token()
        if token is None:
            return None
        return verify_session_token(self.settings, token)

    def handle(self, event: ApiGatewayEvent, context: Any = None) -> ApiGatewayResponse:
        """Route one proxy event and serialize the outcome."""
        correlation_id = get_correlation_id(dict(event))
        log = logger.bind(correlation_id)
        try:
            request = Request.from_event(event, correlation_id)
        except AppError as e:
            log.warning("Request rejected", errorCode=e.error_code, error=e.message)
            return ApiResult.from_exception(e).to_response()

        if request.method == "OPTIONS":
            return ApiResult.ok(message="CORS preflight").to_response()

        log.info("Request received", method=request.method, path=request.path)
        try:
            handler, path_params = self.router.resolve(request.method, request.path)
            request.path_params.update(path_params)
            result = handler(request, self)
        except AppError as e:
            log.warning(
                "Request rejected",
                method=request.method,
                path=request.path,
                errorCode=e.error_code,
                error=e.message,
            )
            result = ApiResult.from_exception(e)
        except Exception as e:
            log.exception("Unhandled error", e, method=request.method, path=request.path)
            result = ApiResult.from_exception(e)

        log.info(
            "Request completed",
            method=request.method,
            path=request.path,
            statusCode=result.status_code,
        )
        return result.to_response()
