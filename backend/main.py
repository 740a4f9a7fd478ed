"""FastAPI application for themed walking course generation."""

import logging
import random

from fastapi import FastAPI, Query, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
from course_generator import usable_spots
from models import Center, CourseRequest, CoursesResponse, Spot, ThemeModel
from smart_courses import plan_courses
from spots import mock_spots
from themes import THEMES

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


app = FastAPI(title="Walking Course Planner", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _rng(seed: int | None) -> random.Random:
    if seed is not None:
        return random.Random(seed)
    if config.COURSE_RANDOM_SEED:
        return random.Random(int(config.COURSE_RANDOM_SEED))
    return random.Random()


async def _courses_or_error(center: Center, spots: list[Spot], duration: int, seed: int | None) -> CoursesResponse:
    usable = usable_spots(spots)
    if len(usable) < config.MIN_USABLE_SPOTS:
        raise HTTPException(
            400,
            f"Only {len(usable)} usable spots nearby; at least {config.MIN_USABLE_SPOTS} are needed.",
        )
    courses = await plan_courses(center, usable, duration, rng=_rng(seed))
    if not courses:
        raise HTTPException(409, "No feasible course for these spots and duration. Try a wider radius or longer duration.")
    return CoursesResponse(count=len(courses), courses=courses)


# ---------- Health check ----------

@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------- Themes ----------

@app.get("/themes")
async def get_themes():
    themes = [
        ThemeModel(
            id=t.id, key=t.key, label=t.label, title=t.title, description=t.description,
            categories=sorted(t.categories), photo=t.photo, hidden_gem=t.hidden_gem,
        )
        for t in THEMES
    ]
    return {"count": len(themes), "themes": themes}


# ---------- Courses ----------

@app.post("/courses", response_model=CoursesResponse)
async def create_courses(request: CourseRequest):
    return await _courses_or_error(request.center, request.spots, request.duration, request.seed)


@app.get("/courses/demo", response_model=CoursesResponse)
async def demo_courses(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    duration: int = Query(180, ge=0, description="Total duration in minutes"),
    seed: int | None = Query(None, description="Random seed for reproducible output"),
):
    """Courses over a built-in mock spot pool laid out around the coordinate."""
    center = Center(lat=lat, lon=lon)
    return await _courses_or_error(center, mock_spots(center), duration, seed)


# ---------- Config (read-only) ----------

@app.get("/config")
async def get_config():
    return {
        "walk_speed_m_per_min": config.WALK_SPEED_M_PER_MIN,
        "overrun_allowance": config.OVERRUN_ALLOWANCE,
        "max_spots_per_course": config.MAX_SPOTS_PER_COURSE,
        "themes_per_batch": config.THEMES_PER_BATCH,
        "min_theme_candidates": config.MIN_THEME_CANDIDATES,
        "min_usable_spots": config.MIN_USABLE_SPOTS,
        "stay_minutes": config.STAY_MINUTES,
        "default_stay_minutes": config.DEFAULT_STAY_MINUTES,
        "dining_cap_buckets": config.DINING_CAP_BUCKETS,
        "dining_cap_max": config.DINING_CAP_MAX,
        "categories": config.CATEGORIES,
    }
