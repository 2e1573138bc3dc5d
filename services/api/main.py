from __future__ import annotations

import os

from site_variant_engine.api import create_app
from site_variant_engine.firestore_store import FirestoreOverrideLog, FirestoreSiteStore
from site_variant_engine.logging_config import setup_logging
from site_variant_engine.override_tracker import InMemoryOverrideLog, OverrideTracker
from site_variant_engine.pubsub_client import DEFAULT_OVERRIDE_TOPIC, PubSubClient
from site_variant_engine.service import VariantService
from site_variant_engine.site_store import InMemorySiteStore

# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
PUBSUB_TOPIC_VARIANT_OVERRIDES = os.getenv("PUBSUB_TOPIC_VARIANT_OVERRIDES", DEFAULT_OVERRIDE_TOPIC)
FIRESTORE_SITES_COLLECTION = os.getenv("FIRESTORE_SITES_COLLECTION", FirestoreSiteStore.COLLECTION_NAME)
FIRESTORE_OVERRIDES_COLLECTION = os.getenv("FIRESTORE_OVERRIDES_COLLECTION", FirestoreOverrideLog.COLLECTION_NAME)

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)

# Use Firestore in production, in-memory for dev
if ENVIRONMENT == "dev":
    site_store = InMemorySiteStore()
    override_log = InMemoryOverrideLog()
else:
    site_store = FirestoreSiteStore(project_id=PROJECT_ID, collection_name=FIRESTORE_SITES_COLLECTION)
    override_log = FirestoreOverrideLog(project_id=PROJECT_ID, collection_name=FIRESTORE_OVERRIDES_COLLECTION)

# Override events feed the analytics pipeline outside dev
pubsub_client = (
    PubSubClient(project_id=PROJECT_ID, override_topic=PUBSUB_TOPIC_VARIANT_OVERRIDES)
    if PROJECT_ID and ENVIRONMENT != "dev"
    else None
)

variant_service = VariantService(
    site_store=site_store,
    tracker=OverrideTracker(override_log),
    publisher=pubsub_client,
)

app = create_app(variant_service)
