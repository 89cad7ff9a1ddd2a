import logging

from fastapi import FastAPI

from storefront_api.api.cart.cart_routes import cart_router
from storefront_api.api.catalog.catalog_routes import catalog_router
from storefront_api.api.mail.mail_routes import mail_router
from storefront_api.api.orders.order_routes import order_router
from storefront_api.api.users.user_routes import user_router
from storefront_api.config import settings
from storefront_api.db import init_db
from storefront_api.store import catalog_queries, user_queries

logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront API")


@app.on_event("startup")
def _on_startup() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    init_db()
    for email in settings.admin_emails:
        user_queries.set_role(email, user_queries.ROLE_ADMIN)
    if settings.seed_catalog:
        catalog_queries.seed_if_empty()
    logger.info("storefront api started")


app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(mail_router)
app.include_router(user_router)


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
