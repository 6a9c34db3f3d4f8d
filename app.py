import io, logging, zipfile
import pandas as pd
import streamlit as st
import plotly.graph_objects as go

from hurrexpo.config import DISPLAY_NAME, DATA_DIR, DATA_URL, LOG_LEVEL, DAY_OFFSET_RANGE, DEFAULT_DAYS_INCLUDED, EXPORT_TYPES, WIND_VARS
from hurrexpo.connectors.hazard_source import HazardDataSource
from hurrexpo.errors import HazardSourceError, InvalidLocationError, InvalidWindowError, MalformedStormIdError
from hurrexpo.exposure import exposure_table, partition_by_loc
from hurrexpo.locations import CommunityMap, resolve
from hurrexpo.metrics import MetricKind

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@st.cache_resource
def load_source(data_dir: str, data_url: str) -> HazardDataSource:
    if data_url:
        return HazardDataSource.from_url(data_url)
    return HazardDataSource.from_directory(data_dir)


def make_exposure_chart(table: pd.DataFrame, title: str) -> go.Figure:
    counts = table.groupby("loc").size().sort_values(ascending=False)
    fig = go.Figure(go.Bar(x=counts.index.astype(str), y=counts.values, marker_color="#4e79a7"))
    fig.update_layout(title=title, xaxis_title="Location", yaxis_title="Exposed storms",
                      margin=dict(l=10, r=10, t=40, b=10), height=320)
    return fig


def zip_partitions(table: pd.DataFrame, out_type: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for loc, part in partition_by_loc(table).items():
            name = f"{loc}.{EXPORT_TYPES[out_type]}"
            if out_type == "csv":
                zf.writestr(name, part.to_csv(index=False))
            else:
                pbuf = io.BytesIO(); part.to_pickle(pbuf, compression=None)
                zf.writestr(name, pbuf.getvalue())
    return buf.getvalue()


st.set_page_config(page_title=f"{DISPLAY_NAME} - Storm Exposure", layout="wide")
st.title(f"{DISPLAY_NAME} - Storm Exposure")
st.caption("County and community hurricane exposure by wind, rain, or storm distance.")

with st.sidebar:
    st.header("Hazard data")
    data_dir = st.text_input("Hazard CSV directory", value=DATA_DIR)
    data_url = st.text_input("Hazard CSV base URL (optional)", value=DATA_URL)

    st.header("Locations")
    counties_text = st.text_area("County FIPS (comma or newline separated)", value="22071, 51700")
    community_file = st.file_uploader("Or a community CSV (columns commun, fips)", type=["csv"])

    st.header("Exposure rule")
    metric = MetricKind(st.selectbox("Metric", [m.value for m in MetricKind], index=0))
    start_year, end_year = st.slider("Storm years", 1988, 2018, (1988, 2005), 1)
    kwargs = {}
    if metric is MetricKind.WIND:
        threshold = st.number_input("Wind limit (m/s)", min_value=0.0, value=20.0, step=1.0)
        kwargs["wind_var"] = st.selectbox("Wind variable", list(WIND_VARS), index=0)
    elif metric is MetricKind.RAIN:
        threshold = st.number_input("Rain limit (mm)", min_value=0.0, value=75.0, step=5.0)
        lo, hi = DAY_OFFSET_RANGE
        kwargs["days_included"] = st.multiselect("Days around closest approach", list(range(lo, hi + 1)),
                                                 default=list(DEFAULT_DAYS_INCLUDED))
        use_dist = st.checkbox("Also require storm within a distance", value=False)
        if use_dist:
            kwargs["dist_limit"] = st.number_input("Distance limit (km)", min_value=0.0, value=500.0, step=25.0)
    else:
        threshold = st.number_input("Distance limit (km)", min_value=0.0, value=100.0, step=25.0)

    st.header("Export")
    out_type = st.selectbox("File type", ["csv", "serialized"], index=0)

try:
    source = load_source(data_dir, data_url.strip())
except HazardSourceError as e:
    st.error(f"Could not load hazard data: {e}")
    st.stop()

if community_file is not None:
    raw_locations = pd.read_csv(community_file, dtype={"fips": str, "commun": str})
else:
    raw_locations = [c.strip() for c in counties_text.replace("\n", ",").split(",") if c.strip()]

try:
    locations = resolve(raw_locations)
except InvalidLocationError as e:
    st.error(str(e))
    st.stop()

try:
    with st.spinner("Computing exposures..."):
        table = exposure_table(source, locations, start_year, end_year, threshold, metric, **kwargs)
except (InvalidWindowError, MalformedStormIdError, HazardSourceError) as e:
    st.error(str(e))
    st.stop()

kind = "communities" if isinstance(locations, CommunityMap) else "counties"
k1, k2, k3 = st.columns(3)
k1.metric("Locations", len(locations.members) if kind == "communities" else len(locations))
k2.metric("Exposure rows", len(table))
k3.metric("Distinct storms", table["storm_id"].nunique() if not table.empty else 0)

if table.empty:
    st.info(f"No storms met the {metric.value} rule for these {kind} between {start_year} and {end_year}.")
    st.stop()

st.plotly_chart(make_exposure_chart(table, f"Storms meeting the {metric.value} rule"), use_container_width=True)

with st.expander("Exposure table", expanded=True):
    st.dataframe(table)

st.download_button("Download full table (CSV)", data=table.to_csv(index=False).encode("utf-8"),
                   file_name=f"{metric.value}_exposure.csv", mime="text/csv")
st.download_button("Download per-location files (zip)", data=zip_partitions(table, out_type),
                   file_name=f"{metric.value}_exposure_{out_type}.zip", mime="application/zip")
