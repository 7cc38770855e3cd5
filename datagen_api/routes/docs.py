"""Root endpoint listing the available data routes."""

from fastapi import APIRouter, Request

from datagen_api.limiter import PUBLIC_LIMIT, limiter

router = APIRouter()

# path -> (description, parameters, example query)
ENDPOINTS: dict[str, tuple[str, list[str], str]] = {
    "/user": ("Generates user data.", ["count", "locale", "seed"], "seed=123"),
    "/address": ("Generates address data.", ["count", "locale", "seed"], "locale=fr&seed=abc"),
    "/payment/card": ("Generates payment card data.", ["count", "locale", "type", "seed"], "seed=456"),
    "/company": ("Generates company data.", ["count", "locale", "seed"], "seed=789"),
    "/product": ("Generates commerce product data.", ["count", "locale", "seed"], "seed=xyz"),
    "/internet": ("Generates internet-related data.", ["count", "locale", "seed"], "seed=111"),
    "/uuid": ("Generates UUIDs.", ["count", "seed"], "seed=222"),
    "/profile": ("Generates a combined profile.", ["count", "locale", "seed"], "seed=333"),
    "/date": (
        "Generates date/time data.",
        ["count", "locale", "format", "years", "refDate", "seed"],
        "seed=444",
    ),
    "/lorem": ("Generates lorem ipsum text.", ["count", "type", "num", "seed"], "seed=555"),
    "/transaction": ("Generates finance transaction data.", ["count", "locale", "seed"], "seed=666"),
    "/readable_text": ("Generates readable text paragraphs.", ["count", "context", "seed"], "seed=777"),
}


@router.get("/")
@limiter.limit(PUBLIC_LIMIT)
async def api_documentation(request: Request):
    """Describe every data endpoint with a ready-to-use example URL."""
    base_url = str(request.base_url).rstrip("/")
    endpoints = {
        "/ping": {
            "description": "Simple health check.",
            "example": f"{base_url}/ping",
            "response": "pong (text/plain)",
        },
    }
    for path, (description, parameters, example) in ENDPOINTS.items():
        endpoints[path] = {
            "description": description,
            "parameters": parameters,
            "example": f"{base_url}{path}?{example}",
        }

    return {
        "message": "Test Data Generation API",
        "documentation": "Provides various types of fake data for testing purposes.",
        "authentication": "Send your API key in the X-API-Key header.",
        "endpoints": endpoints,
    }
