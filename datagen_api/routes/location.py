"""Address data endpoint."""

import logging

from fastapi import APIRouter, Depends

from datagen_api.dependencies import localized_generator
from datagen_api.generators import GeneratorContext
from datagen_api.validation import parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["location"])


def address_fields(fake: GeneratorContext, with_coordinates: bool = True) -> dict:
    fields = {
        "streetAddress": fake.street_address(),
        "city": fake.city(),
        "state": fake.state_abbr(),
        "zipCode": fake.postcode(),
        "country": fake.country(),
    }
    if with_coordinates:
        fields["latitude"] = float(fake.latitude())
        fields["longitude"] = float(fake.longitude())
    return fields


@router.get("/address")
async def generate_address(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate address data."""
    n = parse_count(count)
    logger.info("Handling /address with locale: %s, count: %d", fake.locale, n)
    return fake.produce(n, lambda: address_fields(fake))
