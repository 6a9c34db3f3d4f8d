import streamlit as st

st.set_page_config(page_title="Hurrexpo - User Guide", layout="wide")
st.title("Hurrexpo - User Guide")
st.caption("Quick reference for building storm exposure histories for counties and communities.")

st.markdown(
    """
## 1. Locations
- **Counties** - Enter 5-digit county FIPS codes (e.g. `22071, 51700`). Only counties in the eastern states covered by the storm data are accepted.
- **Communities** - Upload a CSV with columns `commun` and `fips`, one row per member county. A community counts as exposed when its most exposed member county is.

## 2. Exposure rules
- **Wind** - Modeled maximum sustained (or gust) wind at the county, in m/s. Exposed when the wind is at or above the limit.
- **Rain** - Daily rainfall summed over the chosen days around the storm's closest approach (offsets -3 to 3). Missing days add nothing. Optionally require the storm to also pass within a distance limit.
- **Distance** - Closest approach of the storm track, in km. Exposed when the storm came at or within the limit.
- **Years** - Taken from the storm id suffix (`Katrina-2005` is 2005); both ends of the range are included.

## 3. Output
- Each row is one exposed location/storm pair. Community rows report the mean member value and the largest member value (`max_value`), which the exposure decision is made on. For distance this means every member county must be within the limit.
- **Per-location files** - The zip download holds one `<loc>.csv` (or serialized `.pkl`) file per county or community, ready to merge with health time series.

Set these environment variables to customize data access:
```
HURREXPO_DATA_DIR    # directory holding storm_winds.csv, storm_rains.csv, closest_dist.csv
HURREXPO_DATA_URL    # base URL serving the same CSV files
HURREXPO_LOG_LEVEL   # logging level (default INFO)
```
"""
)
