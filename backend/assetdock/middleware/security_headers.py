"""
AssetDock Backend - Security Headers Middleware
=================================================

What:  Adds browser security headers to every response.
How:   A validated SecurityHeadersConfig (one of the named profiles) is
       rendered into a header dict once at startup; the middleware copies
       that dict onto each response.

Profiles (SECURITY_HEADERS_PROFILE):
    default:      HSTS 1 year, frame DENY, CSP enforced with inline scripts allowed
    production:   HSTS 2 years + preload, strict CSP, wider Permissions-Policy
    development:  no HSTS, frame SAMEORIGIN, CSP report-only, no Permissions-Policy
    disabled:     middleware is not installed

X-Content-Type-Options is also set per response by the asset response
builder, so it is present on asset responses even with the profile disabled.
"""

import enum
import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from assetdock.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class FrameOptionsPolicy(str, enum.Enum):
    DENY = "DENY"
    SAMEORIGIN = "SAMEORIGIN"
    ALLOW_FROM = "ALLOW-FROM"


class ReferrerPolicy(str, enum.Enum):
    NO_REFERRER = "no-referrer"
    NO_REFERRER_WHEN_DOWNGRADE = "no-referrer-when-downgrade"
    ORIGIN = "origin"
    ORIGIN_WHEN_CROSS_ORIGIN = "origin-when-cross-origin"
    SAME_ORIGIN = "same-origin"
    STRICT_ORIGIN = "strict-origin"
    STRICT_ORIGIN_WHEN_CROSS_ORIGIN = "strict-origin-when-cross-origin"
    UNSAFE_URL = "unsafe-url"


class HstsConfig(BaseModel):
    enabled: bool = True
    max_age: int = Field(default=31_536_000, ge=0)
    include_subdomains: bool = True
    preload: bool = False

    def header_value(self) -> str:
        value = f"max-age={self.max_age}"
        if self.include_subdomains:
            value += "; includeSubDomains"
        if self.preload:
            value += "; preload"
        return value


class FrameOptionsConfig(BaseModel):
    enabled: bool = True
    policy: FrameOptionsPolicy = FrameOptionsPolicy.DENY
    # Only used with ALLOW-FROM
    allow_from: Optional[str] = None

    def header_value(self) -> str:
        if self.policy is FrameOptionsPolicy.ALLOW_FROM:
            return f"ALLOW-FROM {self.allow_from or ''}".strip()
        return self.policy.value


class CspConfig(BaseModel):
    enabled: bool = True
    policy: str = (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline'; img-src 'self' data:; connect-src 'self'"
    )
    report_only: bool = False

    @property
    def header_name(self) -> str:
        if self.report_only:
            return "Content-Security-Policy-Report-Only"
        return "Content-Security-Policy"


class ReferrerPolicyConfig(BaseModel):
    enabled: bool = True
    policy: ReferrerPolicy = ReferrerPolicy.STRICT_ORIGIN_WHEN_CROSS_ORIGIN


class PermissionsPolicyConfig(BaseModel):
    enabled: bool = True
    policy: str = "camera=(), microphone=(), geolocation=(), payment=()"


class SecurityHeadersConfig(BaseModel):
    """Full security header configuration; `default()` matches the `default` profile."""

    enabled: bool = True
    hsts: HstsConfig = Field(default_factory=HstsConfig)
    content_type_options: bool = True
    frame_options: FrameOptionsConfig = Field(default_factory=FrameOptionsConfig)
    xss_protection: bool = True
    csp: CspConfig = Field(default_factory=CspConfig)
    referrer_policy: ReferrerPolicyConfig = Field(default_factory=ReferrerPolicyConfig)
    permissions_policy: PermissionsPolicyConfig = Field(default_factory=PermissionsPolicyConfig)

    @classmethod
    def default(cls) -> "SecurityHeadersConfig":
        return cls()

    @classmethod
    def production(cls) -> "SecurityHeadersConfig":
        return cls(
            hsts=HstsConfig(max_age=63_072_000, include_subdomains=True, preload=True),
            csp=CspConfig(
                policy=(
                    "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
                    "img-src 'self' data:; connect-src 'self'; frame-ancestors 'none'; "
                    "base-uri 'self'; form-action 'self'"
                ),
            ),
            permissions_policy=PermissionsPolicyConfig(
                policy="camera=(), microphone=(), geolocation=(), payment=(), usb=(), bluetooth=()",
            ),
        )

    @classmethod
    def development(cls) -> "SecurityHeadersConfig":
        return cls(
            hsts=HstsConfig(enabled=False, max_age=0, include_subdomains=False),
            frame_options=FrameOptionsConfig(policy=FrameOptionsPolicy.SAMEORIGIN),
            csp=CspConfig(
                policy=(
                    "default-src 'self' 'unsafe-eval' 'unsafe-inline'; "
                    "script-src 'self' 'unsafe-eval' 'unsafe-inline'; "
                    "style-src 'self' 'unsafe-inline'; img-src 'self' data:; "
                    "connect-src 'self' ws: wss:"
                ),
                report_only=True,
            ),
            referrer_policy=ReferrerPolicyConfig(policy=ReferrerPolicy.NO_REFERRER_WHEN_DOWNGRADE),
            permissions_policy=PermissionsPolicyConfig(enabled=False, policy=""),
        )

    @classmethod
    def from_profile(cls, profile: str) -> "SecurityHeadersConfig":
        """Build the config for a SECURITY_HEADERS_PROFILE value."""
        if profile == "production":
            return cls.production()
        if profile == "development":
            return cls.development()
        if profile == "disabled":
            return cls(enabled=False)
        if profile == "default":
            return cls.default()
        raise ConfigurationError(
            message=f"Unknown security headers profile '{profile}'",
            setting="security_headers_profile",
        )

    def validate_config(self) -> None:
        """
        Reject inconsistent combinations.

        Raises:
            ConfigurationError naming the offending setting.
        """
        if self.hsts.enabled and self.hsts.max_age == 0:
            raise ConfigurationError(
                message="HSTS max_age must be greater than 0 when enabled",
                setting="hsts.max_age",
            )
        if self.csp.enabled and not self.csp.policy:
            raise ConfigurationError(
                message="CSP policy cannot be empty when CSP is enabled",
                setting="csp.policy",
            )
        if self.permissions_policy.enabled and not self.permissions_policy.policy:
            raise ConfigurationError(
                message="Permissions policy cannot be empty when enabled",
                setting="permissions_policy.policy",
            )
        if (
            self.frame_options.enabled
            and self.frame_options.policy is FrameOptionsPolicy.ALLOW_FROM
            and not self.frame_options.allow_from
        ):
            raise ConfigurationError(
                message="X-Frame-Options ALLOW-FROM requires an origin",
                setting="frame_options.allow_from",
            )

    def to_headers(self) -> Dict[str, str]:
        """Render the enabled headers; empty when the config is disabled."""
        if not self.enabled:
            return {}

        headers: Dict[str, str] = {}
        if self.hsts.enabled:
            headers["Strict-Transport-Security"] = self.hsts.header_value()
        if self.content_type_options:
            headers["X-Content-Type-Options"] = "nosniff"
        if self.frame_options.enabled:
            headers["X-Frame-Options"] = self.frame_options.header_value()
        if self.xss_protection:
            headers["X-XSS-Protection"] = "1; mode=block"
        if self.csp.enabled and self.csp.policy:
            headers[self.csp.header_name] = self.csp.policy
        if self.referrer_policy.enabled:
            headers["Referrer-Policy"] = self.referrer_policy.policy.value
        if self.permissions_policy.enabled and self.permissions_policy.policy:
            headers["Permissions-Policy"] = self.permissions_policy.policy
        return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Copies the rendered security headers onto every response.

    Headers already set by a route (e.g. a stricter CSP) are left alone.
    """

    def __init__(self, app: ASGIApp, config: Optional[SecurityHeadersConfig] = None):
        super().__init__(app)
        config = config or SecurityHeadersConfig.default()
        config.validate_config()
        self.headers = config.to_headers()
        logger.debug("Security headers enabled: %s", ", ".join(self.headers) or "none")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            if name not in response.headers:
                response.headers[name] = value
        return response
