# src/config/settings.py

"""Central configuration for the storefront engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront engine."""

    # --- Catalog service ---
    CATALOG_URL: str = os.getenv(
        "STOREFRONT_CATALOG_URL",
        "https://fakestoreapi.com/products",
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before the fetch times out

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Catalog browsing ---
    DEFAULT_SORT: str = "price_asc"
    SEARCH_DESCRIPTIONS: bool = False   # Also match search text in descriptions
    RELATED_LIMIT: int = 4              # Related products shown in the modal

    # --- Presentation policy ---
    CART_PANEL_SECONDS: float = 5.0     # Auto-hide delay for the cart panel

    # --- Persistence keys ---
    FAVORITES_KEY: str = "favorites"
    CART_KEY: str = "cart"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("STOREFRONT_DATA_DIR", str(BASE_DIR / "data"))
    )
    STORE_PATH: Path = DATA_DIR / "storefront.db"
    LOGS_DIR: Path = BASE_DIR / "logs"
