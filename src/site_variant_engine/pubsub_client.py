from __future__ import annotations

import json
import logging
from typing import Any

from google.cloud import pubsub_v1

from .models.override import OverrideRecord

logger = logging.getLogger(__name__)

DEFAULT_OVERRIDE_TOPIC = "variant-overrides"


class PubSubClient:
    """Publishes variant selection events for the analytics pipeline."""

    def __init__(self, project_id: str, *, override_topic: str = DEFAULT_OVERRIDE_TOPIC, publisher=None) -> None:
        self.project_id = project_id
        self.override_topic = override_topic
        self.publisher = publisher or pubsub_v1.PublisherClient()

    def publish(
        self,
        topic_id: str,
        message: dict[str, Any],
        *,
        attributes: dict[str, str] | None = None,
    ) -> str:
        """Publish a JSON message to a Pub/Sub topic.

        Args:
            topic_id: The topic ID (e.g., "variant-overrides")
            message: The message payload as a dictionary
            attributes: Optional message attributes

        Returns:
            Message ID from Pub/Sub
        """
        topic_path = self.publisher.topic_path(self.project_id, topic_id)
        data = json.dumps(message, default=str).encode("utf-8")

        future = self.publisher.publish(topic_path, data, **(attributes or {}))
        message_id = future.result()

        logger.info(
            "Published message to Pub/Sub",
            extra={
                "topic_id": topic_id,
                "message_id": message_id,
                "attributes": attributes,
            },
        )
        return message_id

    def publish_variant_override(self, record: OverrideRecord) -> str:
        """Publish one override record.

        Args:
            record: The record appended to the override log

        Returns:
            Message ID from Pub/Sub
        """
        message = record.model_dump(mode="json", by_alias=True)
        attributes = {
            "event_type": "variant_override" if record.is_override else "variant_selected",
            "site_id": record.site_id,
            "section_type": record.section_type,
        }
        return self.publish(self.override_topic, message, attributes=attributes)


__all__ = ["DEFAULT_OVERRIDE_TOPIC", "PubSubClient"]
