import os
from dotenv import load_dotenv

load_dotenv()

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:5173").split(",")

# Optional fixed seed for reproducible batches (demo / debugging). Empty = fresh seed per batch.
COURSE_RANDOM_SEED = os.getenv("COURSE_RANDOM_SEED", "")

# --- Language-model path ---
LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "60"))
LLM_MAX_CANDIDATES = 150   # spots listed in the prompt

# --- Walking model ---
WALK_SPEED_M_PER_MIN = 80.0
OVERRUN_ALLOWANCE = 1.1    # last leg may overrun the budget by 10%
MAX_SPOTS_PER_COURSE = 8

# --- Batch ---
THEMES_PER_BATCH = 5
MIN_THEME_CANDIDATES = 3   # below this the candidate filter relaxes
MIN_USABLE_SPOTS = 5       # caller-side precondition for a batch

# --- Categories ---
CATEGORIES = ["gourmet", "history", "art", "nature", "shopping", "tourism", "other"]

DINING_CATEGORY = "gourmet"

# Minutes spent at a spot, by category
STAY_MINUTES: dict[str, float] = {
    "gourmet": 60.0,
    "history": 45.0,
    "art": 45.0,
    "nature": 40.0,
}
DEFAULT_STAY_MINUTES = 30.0

# Dining cap per course: (max duration in minutes, cap), first match wins
DINING_CAP_BUCKETS: list[tuple[int, int]] = [
    (90, 1),
    (300, 2),
]
DINING_CAP_MAX = 3

# "Hidden gem" = fewer ratings than this (or none at all)
HIDDEN_GEM_MAX_RATINGS = 50

# --- Spot normalization (raw OSM / Google payloads) ---
OSM_GOURMET_AMENITIES = {"restaurant", "cafe", "fast_food", "food_court", "pub", "bar", "ice_cream", "biergarten"}
OSM_GOURMET_SHOPS = {"bakery", "confectionery", "pastry", "chocolate", "coffee", "tea"}
OSM_NATURE_LEISURE = {"park", "garden"}
OSM_ART_TOURISM = {"museum", "art_gallery"}

GOOGLE_MIN_RATING = 3.5   # places below this (or unrated) are dropped

# Google place type -> category, checked in order
GOOGLE_TYPE_CATEGORIES: list[tuple[tuple[str, ...], str]] = [
    (("park", "natural_feature"), "nature"),
    (("museum", "art_gallery"), "art"),
    (("shrine", "place_of_worship", "hindu_temple"), "history"),
    (("restaurant", "cafe", "food"), "gourmet"),
    (("tourist_attraction",), "tourism"),
]
