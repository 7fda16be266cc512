"""
Geozone Explorer - Streamlit Frontend
Dark-themed map UI with Point/Polygon modes using Streamlit + Folium

Run: streamlit run frontend/streamlit_app.py
Open: http://localhost:8501
Note: Make sure the FastAPI backend is running on port 8000
"""

import os

import folium
import requests
import streamlit as st
from folium.plugins import Draw
from streamlit_folium import st_folium

# Configuration - Use environment variable for Docker, fallback to localhost for local dev
API_URL = os.getenv("API_URL", "http://localhost:8000")
CENTER = {"lat": 37.7749, "lng": -122.4194}
MAX_MARKERS = 500  # Polygon results beyond this are counted but not drawn

CSS = """
<style>
    .stApp { background-color: #0f172a; }
    .main .block-container { padding: 0.5rem 1rem; max-width: 100%; }
    [data-testid="stSidebar"] { background-color: #1e293b; }
    .stMetric { background-color: #1e293b; padding: 0.75rem; border-radius: 8px; }
    .stMetric label { color: #94a3b8 !important; font-size: 0.85rem !important; }
    .stMetric [data-testid="stMetricValue"] { color: #22c55e !important; font-size: 1.5rem !important; }
    h1, h2, h3, h4 { color: #f1f5f9 !important; }
    p, span, label { color: #e2e8f0; }
    .result-title { color: #60a5fa; font-size: 1rem; font-weight: 600; margin-bottom: 0.5rem; }
    .info-box { background-color: #1e3a5f; border-left: 4px solid #3b82f6; padding: 0.75rem; border-radius: 0 8px 8px 0; color: #e2e8f0; }
    .coord-display { font-family: monospace; background: #334155; padding: 0.5rem; border-radius: 6px; margin: 0.5rem 0; }
</style>
"""


# --- Helpers (no Streamlit calls) ---

def geojson_ring_to_latlng(coordinates: list) -> list:
    """GeoJSON ring ([lng, lat], closed) -> API polygon ([lat, lng])."""
    return [[lat, lng] for lng, lat in coordinates]


def boundary_to_locations(boundary: list) -> list:
    """API boundary ([{lat, lng}, ...]) -> folium locations ([[lat, lng], ...])."""
    return [[p["lat"], p["lng"]] for p in boundary]


def error_message(result: dict):
    """Human message for an API error payload, or None if the result is fine."""
    if "error" not in result:
        return None
    message = result.get("message")
    return f"{result['error']}: {message}" if message else str(result["error"])


# --- API calls ---

def _get(path: str, **params) -> dict:
    try:
        response = requests.get(f"{API_URL}{path}", params=params or None, timeout=10)
        return response.json()
    except Exception as e:
        return {"error": "Request failed", "message": str(e)}


def query_point(lat: float, lng: float, resolution: int) -> dict:
    """Resolve a point, then fetch the zone's details."""
    zone = _get(f"/zone/{lat}/{lng}/{resolution}")
    if error_message(zone):
        return zone
    detail = _get(f"/zone/{zone['hash']}/info")
    if error_message(detail):
        return detail
    detail["input"] = zone["input"]
    return detail


def query_neighbor_boundaries(hashes: list) -> list:
    """Boundaries for a handful of zones (used for the immediate neighbors)."""
    boundaries = []
    for h in hashes:
        result = _get(f"/zone/{h}/boundary")
        if not error_message(result):
            boundaries.append(result["boundary"])
    return boundaries


def query_polygon(polygon: list, resolution: int) -> dict:
    """Query API for zones inside a polygon."""
    try:
        response = requests.post(
            f"{API_URL}/zones/polygon", json={"polygon": polygon, "resolution": resolution}, timeout=60
        )
        return response.json()
    except Exception as e:
        return {"error": "Request failed", "message": str(e)}


# --- Maps ---

def create_map_point(result: dict = None) -> folium.Map:
    """Create map for point mode, drawing the resolved zone and its ring."""
    location = [CENTER["lat"], CENTER["lng"]]
    if result and not error_message(result):
        location = [result["center"]["lat"], result["center"]["lng"]]

    m = folium.Map(location=location, zoom_start=13, tiles="CartoDB dark_matter")
    if not result or error_message(result):
        return m

    for boundary in result.get("neighbor_boundaries", []):
        folium.Polygon(
            boundary_to_locations(boundary), color="#64748b", weight=1, fill=True, fill_opacity=0.1
        ).add_to(m)

    folium.Polygon(
        boundary_to_locations(result["boundary"]),
        color="#22c55e", weight=2, fill=True, fill_opacity=0.3,
        tooltip=result["hash"]
    ).add_to(m)

    if result.get("input"):
        folium.Marker(
            location=[result["input"]["lat"], result["input"]["lng"]],
            icon=folium.Icon(color="blue", icon="map-marker", prefix="fa"),
            tooltip=f"Lat: {result['input']['lat']:.4f}, Lng: {result['input']['lng']:.4f}"
        ).add_to(m)

    return m


def create_map_polygon(result: dict = None) -> folium.Map:
    """Create map for polygon mode, with zone centers from the last query."""
    m = folium.Map(location=[CENTER["lat"], CENTER["lng"]], zoom_start=12, tiles="CartoDB dark_matter")

    Draw(
        export=False,
        draw_options={
            "polyline": False,
            "polygon": {"shapeOptions": {"color": "#22c55e", "fillOpacity": 0.3}},
            "rectangle": {"shapeOptions": {"color": "#22c55e", "fillOpacity": 0.3}},
            "circle": False, "circlemarker": False, "marker": False
        },
        edit_options={"edit": True, "remove": True}
    ).add_to(m)

    if result and not error_message(result):
        for zone in result.get("zones", [])[:MAX_MARKERS]:
            folium.CircleMarker(
                location=[zone["center"]["lat"], zone["center"]["lng"]],
                radius=2, color="#60a5fa", fill=True, tooltip=zone["hash"]
            ).add_to(m)

    return m


# --- Page ---

def main():
    st.set_page_config(
        page_title="Geozone Explorer",
        page_icon="⬡",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    st.markdown(CSS, unsafe_allow_html=True)

    # Session state init
    for key in ("point_lat", "point_lng", "point_result", "polygon_result"):
        if key not in st.session_state:
            st.session_state[key] = None

    # Sidebar
    with st.sidebar:
        st.title("⬡ Geozone Explorer")
        st.markdown("---")

        mode = st.radio(
            "Select Mode", options=["point", "polygon"],
            format_func=lambda x: "📍 Point" if x == "point" else "⬡ Polygon",
            horizontal=True
        )
        resolution = st.slider("Resolution", min_value=0, max_value=15, value=9)

        st.markdown("---")
        st.subheader("📖 Instructions")

        if mode == "point":
            st.info("👆 **Click anywhere** on the map to resolve that location's zone.", icon="ℹ️")

            if st.session_state.point_lat is not None:
                st.markdown(f"""
                <div class="coord-display">
                    Lat: {st.session_state.point_lat:.6f}<br>
                    Lng: {st.session_state.point_lng:.6f}
                </div>
                """, unsafe_allow_html=True)

            with st.expander("📝 Manual Input", expanded=st.session_state.point_lat is None):
                input_lat = st.number_input("Latitude", value=CENTER["lat"], format="%.6f", step=0.001)
                input_lng = st.number_input("Longitude", value=CENTER["lng"], format="%.6f", step=0.001)

                if st.button("🔍 Query", use_container_width=True, type="primary"):
                    _run_point_query(input_lat, input_lng, resolution)
                    st.rerun()
        else:
            st.info("✏️ Use polygon/rectangle tools on map.", icon="ℹ️")

        st.markdown("---")
        st.markdown(f"[📚 API Docs]({API_URL}/docs)")

    col_map, col_result = st.columns([3, 1])

    with col_map:
        if mode == "point":
            m = create_map_point(st.session_state.point_result)
            map_data = st_folium(m, width=None, height=700, key="map_point", returned_objects=["last_clicked"])

            click = map_data.get("last_clicked") if map_data else None
            if click:
                new_lat, new_lng = round(click["lat"], 6), round(click["lng"], 6)
                if new_lat != st.session_state.point_lat or new_lng != st.session_state.point_lng:
                    _run_point_query(new_lat, new_lng, resolution)
                    st.rerun()
        else:
            m = create_map_polygon(st.session_state.polygon_result)
            map_data = st_folium(m, width=None, height=700, key="map_polygon")

            drawings = (map_data or {}).get("all_drawings") or []
            if drawings:
                geom = drawings[-1].get("geometry", {})
                if geom.get("type") == "Polygon" and len(geom["coordinates"][0]) >= 4:
                    polygon = geojson_ring_to_latlng(geom["coordinates"][0])
                    with st.spinner("Finding zones..."):
                        st.session_state.polygon_result = query_polygon(polygon, resolution)

    with col_result:
        st.subheader("📊 Results")
        if mode == "point":
            if st.session_state.point_result:
                display_point_result(st.session_state.point_result)
            else:
                st.markdown('<div class="info-box">Click on the map to resolve a zone.</div>', unsafe_allow_html=True)
        else:
            if st.session_state.polygon_result:
                display_polygon_result(st.session_state.polygon_result)
            else:
                st.markdown('<div class="info-box">Draw polygon on map.</div>', unsafe_allow_html=True)


def _run_point_query(lat: float, lng: float, resolution: int):
    st.session_state.point_lat = lat
    st.session_state.point_lng = lng
    result = query_point(lat, lng, resolution)
    if not error_message(result):
        result["neighbor_boundaries"] = query_neighbor_boundaries(result["neighbors"])
    st.session_state.point_result = result


def display_point_result(result: dict):
    """Display point result."""
    err = error_message(result)
    if err:
        st.error(f"❌ {err}")
        return

    st.markdown('<div class="result-title">📍 Zone</div>', unsafe_allow_html=True)
    st.code(result["hash"], language=None)
    st.caption(f"Resolution {result['resolution']} | parent {result.get('parent') or '-'}")
    st.metric("Neighbors", len(result["neighbors"]))
    st.metric("Children", result["childrenCount"])
    st.caption(f"Center: {result['center']['lat']:.6f}, {result['center']['lng']:.6f}")


def display_polygon_result(result: dict):
    """Display polygon result."""
    err = error_message(result)
    if err:
        st.error(f"❌ {err}")
        return

    st.markdown('<div class="result-title">⬡ Polygon Result</div>', unsafe_allow_html=True)
    st.metric("Area", f"{result.get('areaKm2', 0):.2f} km²")
    st.metric("Zones", result["count"])
    if result["count"] > MAX_MARKERS:
        st.caption(f"Showing the first {MAX_MARKERS} zone centers")


if __name__ == "__main__":
    main()
