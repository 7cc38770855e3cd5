"""Company, product, payment card and transaction endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from datagen_api.dependencies import localized_generator
from datagen_api.errors import InvalidParameter
from datagen_api.generators import GeneratorContext
from datagen_api.validation import parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["commerce"])

CARD_TYPES = ("amex", "diners", "discover", "jcb", "maestro", "mastercard", "visa")

TRANSACTION_TYPES = ("deposit", "withdrawal", "payment", "invoice")

PRODUCT_ADJECTIVES = (
    "Awesome", "Elegant", "Ergonomic", "Fantastic", "Handcrafted", "Intelligent",
    "Practical", "Refined", "Rustic", "Sleek", "Small", "Tasty", "Unbranded",
)
PRODUCT_MATERIALS = (
    "Bamboo", "Bronze", "Ceramic", "Concrete", "Cotton", "Fresh", "Frozen",
    "Granite", "Metal", "Plastic", "Rubber", "Soft", "Steel", "Wooden",
)
PRODUCT_NOUNS = (
    "Bacon", "Bike", "Car", "Chair", "Cheese", "Chips", "Computer", "Gloves",
    "Hat", "Keyboard", "Mouse", "Pants", "Pizza", "Shirt", "Shoes", "Table", "Towels",
)
DEPARTMENTS = (
    "Automotive", "Baby", "Beauty", "Books", "Clothing", "Computers", "Electronics",
    "Games", "Garden", "Grocery", "Health", "Home", "Jewelery", "Kids", "Movies",
    "Music", "Outdoors", "Shoes", "Sports", "Tools", "Toys",
)


def _price(fake: GeneratorContext, low_cents: int = 100, high_cents: int = 100_000) -> str:
    return f"{fake.random_int(min=low_cents, max=high_cents) / 100:.2f}"


@router.get("/company")
async def generate_company(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate company data."""
    n = parse_count(count)
    logger.info("Handling /company with locale: %s, count: %d", fake.locale, n)
    return fake.produce(n, lambda: {
        "name": fake.company(),
        "catchPhrase": fake.catch_phrase(),
    })


@router.get("/product")
async def generate_product(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate commerce product data."""
    n = parse_count(count)
    logger.info("Handling /product with locale: %s, count: %d", fake.locale, n)

    def product() -> dict:
        material = fake.random_element(PRODUCT_MATERIALS)
        return {
            "name": " ".join((
                fake.random_element(PRODUCT_ADJECTIVES),
                material,
                fake.random_element(PRODUCT_NOUNS),
            )),
            "price": _price(fake),
            "department": fake.random_element(DEPARTMENTS),
            "description": fake.sentence(nb_words=12),
            "material": material,
        }

    return fake.produce(n, product)


@router.get("/payment/card")
async def generate_payment_card(
    count: str | None = None,
    card_type: str | None = Query(default=None, alias="type"),
    fake: GeneratorContext = Depends(localized_generator),
):
    """Generate payment card data, optionally for one card network."""
    n = parse_count(count)
    kind = card_type.lower() if card_type else None
    if kind is not None and kind not in CARD_TYPES:
        raise InvalidParameter(
            f"Invalid type parameter: '{card_type}'. Supported types are: {', '.join(CARD_TYPES)}"
        )
    logger.info("Handling /payment/card with locale: %s, count: %d, type: %s", fake.locale, n, kind or "any")

    def card() -> dict:
        network = kind or fake.random_element(CARD_TYPES)
        return {
            "cardType": network,
            "cardNumber": fake.credit_card_number(card_type=network),
            "cardCvv": fake.credit_card_security_code(card_type=network),
            "cardExpiry": fake.credit_card_expire(date_format="%m/%Y"),
        }

    return fake.produce(n, card)


@router.get("/transaction")
async def generate_transaction(count: str | None = None, fake: GeneratorContext = Depends(localized_generator)):
    """Generate basic finance transaction data."""
    n = parse_count(count)
    logger.info("Handling /transaction with locale: %s, count: %d", fake.locale, n)

    def transaction() -> dict:
        amount = _price(fake, high_cents=1_000_000)
        code, name = fake.currency()
        account = fake.numerify("########")
        kind = fake.random_element(TRANSACTION_TYPES)
        return {
            "amount": amount,
            "currencyCode": code,
            "currencyName": name,
            "currencySymbol": fake.currency_symbol(code),
            "account": account,
            "transactionType": kind,
            "transactionDescription": (
                f"{kind} transaction at {fake.company()} using card ending with "
                f"****{fake.numerify('####')} for {code} {amount} in account ***{account[-4:]}"
            ),
        }

    return fake.produce(n, transaction)
