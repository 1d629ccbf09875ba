import logging
from typing import Callable, Optional, Protocol

from fastapi import Depends, Request, Response
from fastapi.routing import APIRoute

from app.config import settings
from app.core.errors import Unauthenticated

logger = logging.getLogger(__name__)


# ============================================================
# TRUST BOUNDARY
#
# Callers are authenticated upstream: WeChat Cloud Run verifies the
# mini-program session and injects the caller's openid as a request
# header (callContainer). This service performs no signature, expiry
# or replay checks of its own. A deployment that is reachable without
# the gateway must plug in a verifier that actually checks something.
# ============================================================

class IdentityVerifier(Protocol):
    def verify(self, request: Request) -> Optional[str]:
        """Return the caller's openid, or None when there is none."""
        ...


class HeaderIdentityVerifier:
    """
    Accepts the openid header as-is.
    """

    def __init__(self, header_name: str = settings.OPENID_HEADER):
        self.header_name = header_name

    def verify(self, request: Request) -> Optional[str]:
        # Starlette headers are case-insensitive
        value = request.headers.get(self.header_name, "").strip()
        return value or None


_default_verifier = HeaderIdentityVerifier()


def get_identity_verifier() -> IdentityVerifier:
    return _default_verifier


# ============================================================
# GET CURRENT OPENID
# ============================================================

def get_current_openid(
    request: Request,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> str:
    openid = verifier.verify(request)

    if not openid:
        logger.debug("Rejected %s %s: no openid", request.method, request.url.path)
        raise Unauthenticated()

    return openid


# ============================================================
# ROUTE GATE
#
# FastAPI reads and decodes the JSON body before it resolves any
# dependency, so a broken body would otherwise answer 400 to a caller
# without an openid. Routes that depend on get_current_openid check
# the identity first.
# ============================================================

def _requires_openid(dependant) -> bool:
    return any(
        sub.call is get_current_openid or _requires_openid(sub)
        for sub in dependant.dependencies
    )


class OpenidGateRoute(APIRoute):
    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        if not _requires_openid(self.dependant):
            return handler

        async def gated_handler(request: Request) -> Response:
            overrides = getattr(request.app, "dependency_overrides", {})
            verifier = overrides.get(get_identity_verifier, get_identity_verifier)()

            if not verifier.verify(request):
                logger.debug("Rejected %s %s: no openid", request.method, request.url.path)
                raise Unauthenticated()

            return await handler(request)

        return gated_handler
