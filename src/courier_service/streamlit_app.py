import os

import requests
import streamlit as st

API_BASE = os.getenv("COURIER_API_BASE", os.getenv("API_BASE", "http://localhost:8080")).rstrip("/")
TIMEOUT_SEC = float(os.getenv("COURIER_UI_TIMEOUT_SEC", "30"))


def _reset_state() -> None:
    for key in ["share_result", "quote_result", "error"]:
        if key in st.session_state:
            del st.session_state[key]


def _error_text(resp: requests.Response) -> str:
    try:
        message = resp.json().get("message")
    except ValueError:
        message = None
    return f"{resp.status_code} {message or resp.text}"


def share_file(name: str, mode: str, convert_to: str) -> dict[str, object] | None:
    body: dict[str, object] = {"name": name, "mode": mode}
    if convert_to:
        body["convertTo"] = convert_to
    try:
        resp = requests.post(f"{API_BASE}/shares/files", json=body, timeout=TIMEOUT_SEC)
    except requests.RequestException as e:
        st.session_state["error"] = f"Failed to connect to API: {e}"
        return None
    if resp.status_code != 200:
        st.session_state["error"] = f"Share failed: {_error_text(resp)}"
        return None
    return resp.json()


def calculate_shipping(origin: str, destination: str, weight: float, volume: float) -> dict[str, object] | None:
    params = {
        "originCityName": origin,
        "destinationCityName": destination,
        "weightInKilograms": weight,
        "volumeInLiters": volume,
    }
    try:
        resp = requests.get(f"{API_BASE}/shipping/calculate", params=params, timeout=TIMEOUT_SEC)
    except requests.RequestException as e:
        st.session_state["error"] = f"Failed to connect to API: {e}"
        return None
    if resp.status_code != 200:
        st.session_state["error"] = f"Quote failed: {_error_text(resp)}"
        return None
    return resp.json()


def main() -> None:
    st.set_page_config(page_title="Courier Service", page_icon="📦", layout="centered")
    st.title("📦 Courier Service")
    st.caption(f"API base: {API_BASE}")

    if st.button("Restart", type="secondary"):
        _reset_state()
        st.rerun()

    share_tab, shipping_tab = st.tabs(["Share a file", "Shipping quote"])

    with share_tab:
        with st.form("share"):
            name = st.text_input("File name", placeholder="document.txt")
            mode = st.radio("Visibility", ["public", "private"], horizontal=True)
            convert_to = st.text_input("Convert to (optional)", placeholder="pdf")
            submitted = st.form_submit_button("Share", type="primary")
        if submitted:
            st.session_state.pop("error", None)
            with st.spinner("Sharing (and converting if needed)..."):
                result = share_file(name, str(mode), convert_to.strip())
            if result is not None:
                st.session_state["share_result"] = result
        if "share_result" in st.session_state:
            st.success("File shared!")
            st.json(st.session_state["share_result"])

    with shipping_tab:
        with st.form("shipping"):
            origin = st.text_input("Origin", placeholder="São Paulo, SP")
            destination = st.text_input("Destination", placeholder="Recife, PE")
            weight = st.number_input("Weight (kg)", min_value=0.0, value=1.0)
            volume = st.number_input("Volume (L)", min_value=0.0, value=1.0)
            submitted = st.form_submit_button("Calculate", type="primary")
        if submitted:
            st.session_state.pop("error", None)
            with st.spinner("Calculating..."):
                result = calculate_shipping(origin, destination, float(weight), float(volume))
            if result is not None:
                st.session_state["quote_result"] = result
        if quote := st.session_state.get("quote_result"):
            cents = quote.get("costInCents")
            st.metric("Distance", f"{quote.get('distanceInKilometers')} km")
            st.metric("Cost", f"{cents / 100:.2f}" if isinstance(cents, (int, float)) else "-")

    if err := st.session_state.get("error"):
        st.error(err)


if __name__ == "__main__":
    main()
