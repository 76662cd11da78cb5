"""
Social platform publishing.

Only the publish contract is modelled here: one call that creates a post
and reports where it ended up. Requires LinkedIn credentials configured via
environment variables.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import requests

from .config import get_settings
from .logging_config import publish_logger


class Visibility(Enum):
    """Who can see a published post"""
    PUBLIC = "PUBLIC"
    CONNECTIONS = "CONNECTIONS"
    LOGGED_IN = "LOGGED_IN"


@dataclass
class PostData:
    """What gets sent to the platform"""
    caption: str
    organization_id: str
    image_url: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC


@dataclass
class PublishResult:
    """Result of a publish attempt"""
    success: bool
    post_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None
    published_at: Optional[datetime] = None


class SocialPublisher:
    """Base class for a platform client"""

    def is_configured(self) -> bool:
        return False

    def create_post(self, data: PostData) -> PublishResult:
        raise NotImplementedError


class LinkedInPublisher(SocialPublisher):
    """Publish organization posts through the LinkedIn REST API"""

    def __init__(
        self,
        access_token: Optional[str],
        api_base: str = "https://api.linkedin.com/rest",
        api_version: str = "202401",
        timeout: int = 15,
    ):
        self.access_token = access_token
        self.api_base = api_base.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.access_token)

    def _body(self, data: PostData) -> dict:
        body = {
            "author": f"urn:li:organization:{data.organization_id}",
            "commentary": data.caption,
            "visibility": data.visibility.value,
            "distribution": {
                "feedDistribution": "MAIN_FEED",
                "targetEntities": [],
                "thirdPartyDistributionChannels": [],
            },
            "lifecycleState": "PUBLISHED",
            "isReshareDisabledByAuthor": False,
        }
        if data.image_url:
            body["content"] = {"article": {"source": data.image_url, "title": data.caption[:200]}}
        return body

    def create_post(self, data: PostData) -> PublishResult:
        if not self.is_configured():
            return PublishResult(
                success=False,
                error="LinkedIn is not connected. Set LINKEDIN_ACCESS_TOKEN.",
            )

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "LinkedIn-Version": self.api_version,
            "X-Restli-Protocol-Version": "2.0.0",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                f"{self.api_base}/posts",
                json=self._body(data),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            publish_logger.error("LinkedIn request failed", error=e, organization_id=data.organization_id)
            return PublishResult(success=False, error=str(e))

        if response.status_code != 201:
            publish_logger.warning(
                "LinkedIn rejected post",
                status_code=response.status_code,
                body=response.text[:500],
            )
            return PublishResult(success=False, error=f"LinkedIn returned {response.status_code}")

        post_urn = response.headers.get("x-restli-id", "")
        publish_logger.info("Published to LinkedIn", post_id=post_urn, organization_id=data.organization_id)
        return PublishResult(
            success=True,
            post_id=post_urn,
            url=f"https://www.linkedin.com/feed/update/{post_urn}" if post_urn else None,
            published_at=datetime.now(timezone.utc),
        )


def get_publisher() -> SocialPublisher:
    """FastAPI dependency returning the configured publisher."""
    settings = get_settings()
    return LinkedInPublisher(
        settings.linkedin_access_token,
        api_base=settings.linkedin_api_base,
        api_version=settings.linkedin_api_version,
    )
