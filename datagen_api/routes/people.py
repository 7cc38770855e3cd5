"""User and profile data endpoints."""

import logging

from fastapi import APIRouter, Depends

from datagen_api.dependencies import localized_generator
from datagen_api.generators import GeneratorContext
from datagen_api.routes.location import address_fields
from datagen_api.validation import parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["people"])


def user_fields(fake: GeneratorContext) -> dict:
    return {
        "firstName": fake.first_name(),
        "lastName": fake.last_name(),
        "email": fake.email(),
        "username": fake.user_name(),
    }


@router.get("/user")
async def generate_user(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate user data."""
    n = parse_count(count)
    logger.info("Handling /user with locale: %s, count: %d", fake.locale, n)
    return fake.produce(n, lambda: {**user_fields(fake), "avatar": fake.image_url()})


@router.get("/profile")
async def generate_profile(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate a combined user and address profile."""
    n = parse_count(count)
    logger.info("Handling /profile with locale: %s, count: %d", fake.locale, n)
    return fake.produce(n, lambda: {
        "user": user_fields(fake),
        "address": address_fields(fake, with_coordinates=False),
    })
