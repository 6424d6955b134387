from fastapi import APIRouter

from marketplace.api.routes import razorpay_webhook
from marketplace.domains.ecommerce.api import routes as orders

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(orders.router)
api_router.include_router(razorpay_webhook.router, tags=["Razorpay Webhook"])
