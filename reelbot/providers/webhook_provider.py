"""Webhook-backed producer and publisher.

Both adapters delegate to an external service over JSON/HTTP: the producer to
a media-assembly service that returns the rendered artifact paths, the
publisher to an upload service that returns the public video URL.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from reelbot.providers.base import Producer, ProducerError, PublishResult, Publisher, PublisherError
from reelbot.queues.models import QueuedVideo


def _headers(token: str) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _post(
    *,
    url: str,
    token: str,
    payload: Dict[str, Any],
    timeout_seconds: int,
    client: Optional[httpx.Client],
) -> httpx.Response:
    if client is not None:
        return client.post(url, headers=_headers(token), json=payload)
    with httpx.Client(timeout=timeout_seconds) as owned:
        return owned.post(url, headers=_headers(token), json=payload)


def _detail(response: httpx.Response) -> str:
    detail = response.text.strip()
    if len(detail) > 240:
        detail = detail[:240] + "..."
    return detail


class WebhookProducer(Producer):
    provider_name = "webhook"

    def __init__(
        self,
        *,
        webhook_url: str,
        webhook_token: str = "",
        timeout_seconds: int = 900,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._webhook_url = webhook_url.strip()
        self._webhook_token = webhook_token.strip()
        self._timeout_seconds = max(1, timeout_seconds)
        self._client = client

    def generate(self, topic: str) -> QueuedVideo:
        return self._request({"mode": "topic", "topic": topic})

    def generate_autonomous(self) -> QueuedVideo:
        return self._request({"mode": "autonomous"})

    def _request(self, payload: Dict[str, Any]) -> QueuedVideo:
        if not self._webhook_url:
            raise ProducerError("producer_webhook_url_missing")
        try:
            response = _post(
                url=self._webhook_url,
                token=self._webhook_token,
                payload=payload,
                timeout_seconds=self._timeout_seconds,
                client=self._client,
            )
        except httpx.HTTPError as exc:
            raise ProducerError(f"producer_webhook_transport_failed error={exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise ProducerError(
                f"producer_webhook_failed status={response.status_code} detail={_detail(response)}"
            )

        try:
            body: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise ProducerError("producer_webhook_invalid_json_response") from exc
        if not isinstance(body, dict):
            raise ProducerError("producer_webhook_invalid_payload_format")

        video_path = str(body.get("video_path") or "").strip()
        if not video_path:
            raise ProducerError("producer_webhook_missing_video_path")

        try:
            return QueuedVideo(
                video_path=video_path,
                preview_path=(str(body["preview_path"]) if body.get("preview_path") else None),
                title=str(body.get("title") or "").strip() or "Untitled",
                script=str(body.get("script") or ""),
                tags=[str(tag) for tag in body.get("tags") or []],
                topic=str(body.get("topic") or payload.get("topic") or ""),
            )
        except ValidationError as exc:
            raise ProducerError("producer_webhook_invalid_artifact") from exc


class WebhookPublisher(Publisher):
    provider_name = "webhook"

    def __init__(
        self,
        *,
        webhook_url: str,
        webhook_token: str = "",
        timeout_seconds: int = 600,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._webhook_url = webhook_url.strip()
        self._webhook_token = webhook_token.strip()
        self._timeout_seconds = max(1, timeout_seconds)
        self._client = client

    def publish(self, video: QueuedVideo) -> PublishResult:
        if not self._webhook_url:
            raise PublisherError("publisher_webhook_url_missing")

        payload = {
            "video_path": video.video_path,
            "title": video.title,
            "description": video.script,
            "tags": list(video.tags),
        }
        try:
            response = _post(
                url=self._webhook_url,
                token=self._webhook_token,
                payload=payload,
                timeout_seconds=self._timeout_seconds,
                client=self._client,
            )
        except httpx.HTTPError as exc:
            raise PublisherError(f"publisher_webhook_transport_failed error={exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise PublisherError(
                f"publisher_webhook_failed status={response.status_code} detail={_detail(response)}"
            )

        try:
            body: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise PublisherError("publisher_webhook_invalid_json_response") from exc
        if not isinstance(body, dict):
            raise PublisherError("publisher_webhook_invalid_payload_format")

        url = str(body.get("url") or "").strip()
        if not url:
            raise PublisherError("publisher_webhook_missing_url")
        video_id = str(body.get("video_id") or body.get("id") or "").strip() or None
        return PublishResult(url=url, video_id=video_id, payload=body)
