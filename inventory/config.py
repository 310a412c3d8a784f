# inventory/config.py
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    data_path: str = os.getenv("INVENTORY_DATA_PATH", "products.json")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Client side
    api_url: str = os.getenv("INVENTORY_API_URL", "http://localhost:3000")
    low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))


settings = Settings()
