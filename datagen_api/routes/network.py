"""Internet and UUID endpoints."""

import logging

from fastapi import APIRouter, Depends

from datagen_api.dependencies import default_generator, localized_generator
from datagen_api.generators import GeneratorContext
from datagen_api.validation import parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["network"])


@router.get("/internet")
async def generate_internet(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate internet-related data."""
    n = parse_count(count)
    logger.info("Handling /internet with locale: %s, count: %d", fake.locale, n)
    return fake.produce(n, lambda: {
        "ip": fake.ipv4(),
        "ipv6": fake.ipv6(),
        "mac": fake.mac_address(),
        "userAgent": fake.user_agent(),
        "domainName": fake.domain_name(),
        "url": fake.url(),
    })


@router.get("/uuid")
async def generate_uuid(count: str | None = None, fake: GeneratorContext = Depends(default_generator)):
    n = parse_count(count)
    logger.info("Handling /uuid with count: %d", n)
    return fake.produce(n, lambda: {"uuid": fake.uuid4()})
