"""Interactive map of a project's route, resume point and captured images."""

import os
from typing import Optional

import folium
from folium import plugins

from .capture import parse_image_filename
from .models import Waypoint
from .state import NavigatorState


def list_captures(image_path: str) -> list[dict]:
    """Parse every capture filename in the images directory, oldest first"""
    if not os.path.isdir(image_path):
        return []
    captures = []
    for fname in sorted(os.listdir(image_path)):
        parsed = parse_image_filename(fname)
        if parsed:
            parsed["filename"] = fname
            captures.append(parsed)
    return captures


def create_map(route: list[Waypoint], state: Optional[NavigatorState] = None,
               captures: Optional[list[dict]] = None) -> folium.Map:
    """Create an interactive map with route progress overlay."""
    captures = captures or []
    state = state or NavigatorState()
    step = min(state.step, len(route) - 1)

    center_lat = sum(w.lat for w in route) / len(route)
    center_lng = sum(w.lng for w in route) / len(route)
    m = folium.Map(location=[center_lat, center_lng], zoom_start=15, tiles="CartoDB positron")
    folium.TileLayer("OpenStreetMap", name="OpenStreetMap").add_to(m)

    done_layer = folium.FeatureGroup(name="Completed route", show=True)
    todo_layer = folium.FeatureGroup(name="Remaining route", show=True)
    capture_layer = folium.FeatureGroup(name="Captures", show=True)

    coords = [[w.lat, w.lng] for w in route]
    if step > 0:
        folium.PolyLine(coords[:step + 1], weight=5, color="#22c55e", opacity=0.8).add_to(done_layer)
    if step < len(route) - 1:
        folium.PolyLine(coords[step:], weight=3, color="#3b82f6", opacity=0.6,
                        dash_array="6 6").add_to(todo_layer)

    alternates = 0
    for capture in captures:
        if capture["alternate"]:
            alternates += 1
        popup_text = f"""
            <b>{capture['pano']}</b><br>
            Image date: {capture['image_date'] or 'unknown'}<br>
            Captured: {capture['timestamp']}<br>
            {'<i>Alternate pano</i>' if capture['alternate'] else ''}
        """
        folium.CircleMarker(
            [capture["lat"], capture["lng"]],
            radius=4,
            color="#f97316" if capture["alternate"] else "#ef4444",
            fill=True,
            fill_opacity=0.8,
            popup=folium.Popup(popup_text, max_width=250),
        ).add_to(capture_layer)

    done_layer.add_to(m)
    todo_layer.add_to(m)
    capture_layer.add_to(m)

    folium.Marker(coords[0], popup="Start", icon=folium.Icon(color="green", icon="play")).add_to(m)
    folium.Marker(coords[-1], popup="Finish", icon=folium.Icon(color="red", icon="flag")).add_to(m)
    if state.lat is not None and state.lng is not None:
        folium.Marker(
            [state.lat, state.lng],
            popup=f"Resume point: step {state.step}, pano {state.pano}",
            icon=folium.Icon(color="blue", icon="pause"),
        ).add_to(m)

    folium.LayerControl().add_to(m)

    legend_html = f"""
    <div style="
        position: fixed;
        bottom: 50px;
        left: 50px;
        z-index: 1000;
        background-color: white;
        padding: 10px;
        border-radius: 5px;
        border: 2px solid grey;
        font-family: Arial;
        font-size: 12px;
    ">
        <b>Roadtripper Progress</b><br>
        <hr style="margin: 5px 0">
        Step: {step}/{len(route) - 1}<br>
        Captures: {len(captures)} ({alternates} alternate)<br>
        Bad panos: {len(state.route.bad_panos)}
    </div>
    """
    m.get_root().html.add_child(folium.Element(legend_html))

    plugins.Fullscreen().add_to(m)

    return m
