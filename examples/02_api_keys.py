"""
API key examples.

Demonstrates:
- Reading the key from ``Authorization: Token token=<key>`` or ``?apikey=``
- Delegating key validation to a callback
- Minting request identifiers with ``ctx.token()``
- Enabling CORS for every response via APIConfig
"""

from fastapi import Depends, FastAPI

from fastapi_simple_api import (
    APIConfig,
    RequestContext,
    api_context,
    register_exception_handlers,
)

app = FastAPI(title="API Key Examples")
register_exception_handlers(app)

context = api_context(APIConfig(cors=True))

API_KEYS = {"secret-api-key", "another-key"}


def validate_api_key(key: str) -> bool:
    """Validate an API key (mock implementation)."""
    return key in API_KEYS


@app.post("/orders")
async def create_order(ctx: RequestContext = Depends(context)):
    """Create an order. Requires a valid API key."""
    ctx.post().apikey(validate_api_key)
    ctx.expecting("sku", "quantity|int", "gift?false|bool", "tags?|array")
    ctx.respond(
        201,
        {
            "order_id": ctx.token(16),
            "sku": ctx.param("sku"),
            "quantity": ctx.param("quantity"),
            "gift": ctx.param("gift"),
        },
    )


@app.get("/ping")
async def ping(ctx: RequestContext = Depends(context)):
    """Any key is accepted when no validator is given."""
    ctx.get().apikey()
    ctx.respond(200, "pong")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
