import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import get_current_user_id
from config import Settings, setup_logging
from database import OrderStore, RestaurantStore, UserStore, connect
from errors import InternalFailure, InvalidInput, OrderFlowError
from orders import OrderService
from payments import RazorpayGateway
from schemas import CheckoutSessionRequest, PaymentOrderResponse, VerifyPaymentRequest, VerifyPaymentResponse

logger = logging.getLogger(__name__)


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("")
def get_my_orders(user_id: str = Depends(get_current_user_id),
                  service: OrderService = Depends(get_order_service)) -> List[dict]:
    return service.get_my_orders(user_id)


@router.post("/payment/create-order", response_model=PaymentOrderResponse)
def create_razorpay_order(payload: CheckoutSessionRequest,
                          user_id: str = Depends(get_current_user_id),
                          service: OrderService = Depends(get_order_service)):
    return service.create_payment_order(user_id, payload)


@router.post("/payment/verify", response_model=VerifyPaymentResponse,
             dependencies=[Depends(get_current_user_id)])
def verify_payment(payload: VerifyPaymentRequest,
                   service: OrderService = Depends(get_order_service)):
    return service.verify_payment(payload)


def validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {error.get('msg')}" if loc else error.get("msg", "Invalid request"))
    return "; ".join(parts) or "Invalid request"


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = None
    if getattr(app.state, "order_service", None) is None:
        settings = app.state.settings.require()
        setup_logging(settings.log_level)
        client, db = connect(settings.database_url, settings.database_name)
        app.state.db = db
        app.state.users = UserStore(db)
        app.state.order_service = OrderService(
            orders=OrderStore(db),
            restaurants=RestaurantStore(db),
            users=app.state.users,
            gateway=RazorpayGateway.from_settings(settings),
            frontend_url=settings.frontend_url,
        )
    yield
    if client is not None:
        client.close()
        logger.info("MongoDB client closed")


def create_app(settings: Optional[Settings] = None, order_service: Optional[OrderService] = None,
               users: Optional[UserStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Food Ordering API", lifespan=lifespan)
    app.state.settings = settings
    app.state.order_service = order_service
    app.state.users = users
    app.state.db = None
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(OrderFlowError)
    async def order_flow_error_handler(request: Request, exc: OrderFlowError):
        return JSONResponse(status_code=exc.status_code, content=exc.body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = InvalidInput(validation_message(exc))
        return JSONResponse(status_code=error.status_code, content=error.body())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        error = InternalFailure("something went wrong")
        return JSONResponse(status_code=error.status_code, content=error.body())

    @app.get("/")
    def read_root():
        return {"message": "Food Ordering API is running"}

    @app.get("/health")
    def health():
        started_at = app.state.started_at
        response = {
            "message": "health OK!",
            "uptime": int(time.time() - started_at),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "serverStartTime": datetime.fromtimestamp(started_at, timezone.utc).isoformat(),
            "database": "Not Connected",
        }
        db = app.state.db
        if db is not None:
            try:
                db.command("ping")
                response["database"] = "Connected"
            except Exception as e:
                logger.warning(f"Database ping failed: {e}")
                response["database"] = f"Error: {str(e)[:50]}"
        return response

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
