import os
import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"


class Settings(BaseModel):
    """Deployment configuration, read from the environment"""

    database_url: str = Field("mongodb://localhost:27017", description="MongoDB connection URI")
    database_name: str = Field("food_ordering", description="MongoDB database name")

    razorpay_key_id: str = Field("", description="Public Razorpay key, sent to the client")
    razorpay_key_secret: str = Field("", description="Razorpay secret used for order creation and signatures")
    razorpay_currency: str = Field("INR", description="Currency for remote payment orders")

    frontend_url: str = Field("http://localhost:5173", description="Base URL for post-payment redirects")

    jwt_secret: str = Field("", description="Key used to verify bearer tokens")
    jwt_algorithm: str = Field("HS256")
    jwt_audience: Optional[str] = None

    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","))
    log_level: str = "INFO"
    port: int = 7001

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return cls(
            database_url=os.getenv("DATABASE_URL", "mongodb://localhost:27017"),
            database_name=os.getenv("DATABASE_NAME", "food_ordering"),
            razorpay_key_id=os.getenv("RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET", ""),
            razorpay_currency=os.getenv("RAZORPAY_CURRENCY", "INR"),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
            jwt_secret=os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_audience=os.getenv("JWT_AUDIENCE") or None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=int(os.getenv("PORT", 7001)),
        )

    def require(self):
        """Fail fast when a setting the service cannot run without is missing"""
        if not self.razorpay_key_id:
            raise ValueError("No RAZORPAY_KEY_ID set in environment")
        if not self.razorpay_key_secret:
            raise ValueError("No RAZORPAY_KEY_SECRET set in environment")
        if not self.jwt_secret:
            raise ValueError("No JWT_SECRET set in environment")
        return self


def setup_logging(level: str = "INFO"):
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=log_format,
        handlers=[logging.StreamHandler()],
    )
