import logging
from contextlib import asynccontextmanager

from resume_analyzer.ai.factory import get_ai_client
from resume_analyzer.core.config import get_scoring_policy
from resume_analyzer.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Static tables are loaded once here and never mutated afterwards.
    policy = get_scoring_policy()
    taxonomy = get_default_taxonomy_provider()
    client = get_ai_client()
    logger.info(
        "startup scoring_policy=%s taxonomy=%s skills=%s ai_available=%s",
        policy.version,
        taxonomy.version,
        len(taxonomy.entries()),
        client.available,
    )
    yield
