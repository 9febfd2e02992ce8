import json
import base64

import streamlit as st
import pandas as pd
import requests

from config import API_BASE_URL
from services.cardinality_reducer import TruncationToggle

# ========================
# CONFIG
# ========================
BASE_URL = API_BASE_URL

st.set_page_config(
    page_title="Smart Dashboard Charts - Streamlit",
    layout="wide"
)

EXAMPLE_DESCRIPTOR = {
    "title": "Sales by region",
    "kind": "BAR",
    "categoryColumn": "region",
    "valueColumns": ["sales"],
}

# ========================
# STATE VARIABLES
# ========================
if "session_id" not in st.session_state:
    st.session_state.session_id = None

if "sheets" not in st.session_state:
    st.session_state.sheets = []

if "file_name" not in st.session_state:
    st.session_state.file_name = None

# Component-local "show all / top N" flag
if "show_all" not in st.session_state:
    st.session_state.show_all = False


def store_show_all(show_all: bool):
    st.session_state.show_all = show_all


truncation = TruncationToggle(show_all=st.session_state.show_all, on_change=store_show_all)


def render_diagnostic(result: dict):
    st.warning(f"**Chart warning: {result.get('title') or 'untitled'}**\n\n{result['message']}")
    if result.get("missing_columns"):
        st.caption("Missing: " + ", ".join(result["missing_columns"]))
    if result.get("available_columns"):
        st.caption("Available columns: " + ", ".join(result["available_columns"]))


# Title
st.title("Smart Dashboard Charts (Streamlit Version)")

st.markdown("""
Upload an Excel or CSV file → preview a sheet → paste an AI chart descriptor →
see the rendered chart, or a warning explaining why it cannot be drawn.
""")

# 1. FILE UPLOAD
st.header("1. Upload Dataset")

uploaded_file = st.file_uploader("Upload your spreadsheet", type=["xlsx", "xls", "csv"])

if uploaded_file is not None:
    if st.button("Upload & Process File"):
        with st.spinner("Uploading..."):
            files = {"file": (uploaded_file.name, uploaded_file.getvalue())}

            resp = requests.post(f"{BASE_URL}/upload/dataset", files=files)

            if resp.status_code != 200:
                st.error(f"Upload failed: {resp.text}")
            else:
                data = resp.json()
                st.session_state.session_id = data["session_id"]
                st.session_state.sheets = data["sheets"]
                st.session_state.file_name = data["file_name"]

                st.success("File uploaded successfully!")

selected_sheet = None

# 2. SHEET PREVIEW + COLUMNS
st.header("2. Preview & Columns")

if st.session_state.session_id and st.session_state.sheets:

    if st.button("Close dataset"):
        requests.delete(f"{BASE_URL}/upload/dataset/{st.session_state.session_id}")
        st.session_state.session_id = None
        st.session_state.sheets = []
        st.session_state.file_name = None
        st.session_state.show_all = False
        st.rerun()

    sheet_names = [s["sheet_name"] for s in st.session_state.sheets]
    selected_sheet = st.selectbox("Select a sheet", sheet_names)

    if st.button("Load Preview & Columns"):
        with st.spinner(f"Loading preview for {selected_sheet}..."):
            preview_req = {
                "session_id": st.session_state.session_id,
                "sheet_name": selected_sheet,
                "n_rows": 20
            }
            prev_res = requests.post(f"{BASE_URL}/data/preview", json=preview_req).json()

            if "rows" in prev_res:
                st.subheader("Preview (first 20 rows)")
                st.dataframe(pd.DataFrame(prev_res["rows"]), use_container_width=True)

            cols_req = {
                "session_id": st.session_state.session_id,
                "sheet_name": selected_sheet
            }
            cols_res = requests.post(f"{BASE_URL}/data/columns", json=cols_req).json()

            if "columns" in cols_res:
                st.subheader("Columns")
                st.table(pd.DataFrame(cols_res["columns"]))

# 3. CHART FROM DESCRIPTOR
st.header("3. Render Chart from Descriptor")

if st.session_state.session_id and selected_sheet:
    dark_mode = st.checkbox("Dark mode", value=False)
    raw_descriptor = st.text_area(
        "Chart descriptor (JSON)",
        value=json.dumps(EXAMPLE_DESCRIPTOR, indent=2),
        height=200,
    )

    try:
        descriptor = json.loads(raw_descriptor)
    except json.JSONDecodeError as e:
        descriptor = None
        st.error(f"Descriptor is not valid JSON: {e}")

    if descriptor is not None:
        chart_req = {
            "session_id": st.session_state.session_id,
            "sheet_name": selected_sheet,
            "descriptor": descriptor,
            "show_all": st.session_state.show_all,
            "dark_mode": dark_mode,
        }
        resp = requests.post(f"{BASE_URL}/charts/render", json=chart_req)

        if resp.status_code != 200:
            st.error(f"Error: {resp.text}")
        else:
            payload = resp.json()
            result = payload["result"]

            if result["status"] == "diagnostic":
                render_diagnostic(result)
            else:
                if result.get("toggle_label"):
                    st.button(result["toggle_label"], on_click=truncation.toggle)

                if payload.get("image_base64"):
                    st.image(base64.b64decode(payload["image_base64"]))
                else:
                    st.info("The chart could not be drawn.")

                with st.expander("Render plan"):
                    st.json({k: result[k] for k in ("kind", "field_mapping", "layout", "is_truncated", "display_limit")})
