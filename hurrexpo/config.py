import os

DISPLAY_NAME = "Hurrexpo"
# State FIPS prefixes covered by the storm hazard data (eastern United States)
SUPPORTED_STATE_FIPS = frozenset([
    "01", "05", "09", "10", "11", "12", "13", "17", "18", "19", "20", "21", "22", "23",
    "24", "25", "26", "27", "28", "29", "31", "33", "34", "36", "37", "38", "39", "40",
    "42", "44", "45", "46", "47", "48", "50", "51", "54", "55",
])
DAY_OFFSET_RANGE = (-3, 3)
DEFAULT_DAYS_INCLUDED = (-2, -1, 0, 1)
WIND_VARS = ("max_sust", "max_gust")

HAZARD_KINDS = ("wind", "rain", "distance")
SOURCE_COLUMNS = {
    "wind": ["storm_id", "fips", "max_sustained", "max_gust"],
    "rain": ["storm_id", "fips", "date", "precipitation_mm", "closest_approach_date"],
    "distance": ["storm_id", "fips", "distance_km"],
}
SOURCE_DATE_COLUMNS = {"rain": ["date", "closest_approach_date"], "distance": ["closest_approach_date"]}
SOURCE_FILES = {"wind": "storm_winds.csv", "rain": "storm_rains.csv", "distance": "closest_dist.csv"}
# Source column -> output column
OUTPUT_RENAMES = {
    "max_sustained": "max_sust",
    "precipitation_mm": "precip_mm",
    "distance_km": "dist_km",
    "closest_approach_date": "closest_date",
}
COMMUNITY_COLUMNS = ["commun", "fips"]

EXPORT_TYPES = {"csv": "csv", "serialized": "pkl", "pickle": "pkl"}

DATA_DIR = os.environ.get("HURREXPO_DATA_DIR", "sample_data")
DATA_URL = os.environ.get("HURREXPO_DATA_URL", "")
LOG_LEVEL = os.environ.get("HURREXPO_LOG_LEVEL", "INFO")
