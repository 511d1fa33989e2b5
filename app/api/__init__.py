# app/api/__init__.py
from fastapi import FastAPI
from app.api.errors import register_error_handlers
from app.api.routers import carts, health, orders, sales, users, vouchers


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shop Service",
        version="1.0.0",
    )
    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(sales.router)
    app.include_router(vouchers.router)

    return app
