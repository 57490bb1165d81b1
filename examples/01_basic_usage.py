"""
Basic usage example of fastapi-simple-api.

Demonstrates:
- Getting the per-request context as a FastAPI dependency
- Guarding an endpoint to one HTTP verb
- Declaring expected parameters with defaults and types
- Answering with the standard JSON envelope
"""

from fastapi import Depends, FastAPI

from fastapi_simple_api import RequestContext, api_context, register_exception_handlers

app = FastAPI(title="Basic Simple API Example")
register_exception_handlers(app)

PRODUCTS = [
    {"id": 1, "name": "Keyboard", "price": 49.0},
    {"id": 2, "name": "Mouse", "price": 19.5},
    {"id": 3, "name": "Monitor", "price": 189.0},
]


@app.api_route("/products", methods=["GET", "POST"])
async def list_products(ctx: RequestContext = Depends(api_context())):
    """List products. Any other verb answers 405."""
    ctx.get()
    # Fill defaults first, then type-check whatever the client sent
    ctx.expecting("limit?10", "max_price?1000")
    ctx.expecting("limit|int", "max_price|float")

    max_price = ctx.param("max_price")
    items = [p for p in PRODUCTS if p["price"] <= max_price]
    ctx.respond(200, {"products": items[: ctx.param("limit")]})


@app.api_route("/products/{product_id}", methods=["GET", "PUT", "DELETE"])
async def product(product_id: int, ctx: RequestContext = Depends(api_context())):
    """Route on the method with chained verb guards."""
    found = [p for p in PRODUCTS if p["id"] == product_id]
    if not found:
        ctx.respond(404, f"product {product_id} not found")

    ctx.get(lambda c: c.respond(200, found[0]))
    ctx.put(lambda c: c.expecting("name", "price|float").respond(200, c.params()))
    ctx.delete()
    ctx.respond(200, f"product {product_id} deleted")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
