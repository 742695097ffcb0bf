# ===== CONFIGURATION & CONSTANTS =====
import os

# --- General Settings ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CACHE_DIR = os.getenv("CACHE_DIR", "cache")
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() in ("1", "true", "yes")
DEFAULT_CACHE_TTL = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour in seconds
WEB_DATA_DIR = os.getenv("WEB_DATA_DIR", "web_data")

# --- Network Settings ---
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "25"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_INITIAL_DELAY = float(os.getenv("RETRY_INITIAL_DELAY", "2.0"))
RETRYABLE_STATUSES = [403, 429, 502, 503, 504]
# Upper bound for a single adapter (all of its requests); 0 disables it
ADAPTER_TIMEOUT = float(os.getenv("ADAPTER_TIMEOUT", "60"))

# --- Web Scraping & API Headers ---
COMMON_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept': 'application/json, text/plain, */*',
    'Accept-Encoding': 'gzip, deflate',
    'Connection': 'keep-alive'
}

# --- Catalog Settings ---
ALL_CATEGORIES = "All"
NO_IMAGE_PLACEHOLDER = "https://placehold.co/400x400/1a1a1a/666666?text=No+Image"

# Per-category precedence: {category: {source_id: rank}}; higher rank wins a collision
DEDUPE_PRECEDENCE = {
    "Skin": {"cs2:skins": 10, "cs2:skins_not_grouped": 5},
}

# --- Valorant Source ---
VALORANT_API_BASE = "https://valorant-api.com/v1"

# --- CS2 Source ---
CS2_API_BASE = "https://raw.githubusercontent.com/ByMykel/CSGO-API/main/public/api/en"
CS2_IMAGE_CDN = "https://community.akamai.steamstatic.com/economy/image/"

# --- PUBG Source ---
PUBG_API_BASE = "https://raw.githubusercontent.com/pubgapi/v2/main"
PUBG_PLACEHOLDER = "https://placehold.co/400x400/3a3a3a/666666?text=PUBG+Item"

# --- Dota 2 Source ---
DOTA_HEROSTATS_URL = "https://api.opendota.com/api/herostats"
DOTA_CDN_BASE_URL = "https://cdn.dota2.com"

# --- Apex Legends Source ---
APEX_DATA_URL = "https://raddythebrand.github.io/apex-legends/data.json"
APEX_PLACEHOLDER = "https://placehold.co/64x64/0a101f/1e90ff?text=?"

# --- League of Legends Source ---
LOL_VERSIONS_URL = "https://ddragon.leagueoflegends.com/api/versions.json"
LOL_CHAMPIONS_URL_TEMPLATE = "https://ddragon.leagueoflegends.com/cdn/{version}/data/en_US/champion.json"
LOL_CHAMPION_IMAGE_TEMPLATE = "https://ddragon.leagueoflegends.com/cdn/{version}/img/champion/{image}"
LOL_FALLBACK_VERSION = "13.1.1"

# --- Fortnite Source ---
FORTNITE_API_BASE = "https://fortnite-api.com"
FORTNITE_PLACEHOLDER = "https://placehold.co/200x200/1e293b/64748b?text=No+Image"

# --- Marvel Rivals Source ---
MARVEL_RIVALS_API_URL = "https://marvelrivalsapi.com/api/v1/heroes"
MARVEL_RIVALS_BASE_URL = "https://marvelrivalsapi.com"
MARVEL_RIVALS_API_KEY = os.getenv("MARVEL_RIVALS_API_KEY")
