"""
Streamlit Web Application for Card Cropping
Upload a card photo, drag the four corners onto the card, and download the flattened image.
"""
import streamlit as st
from streamlit_image_coordinates import streamlit_image_coordinates
import cv2
from io import BytesIO
from PIL import Image

from cardcrop.geometry import CornerRole, Point2D, Size
from cardcrop.imaging import from_pil, encode_image
from cardcrop.session import CropSession, render_overlay, magnifier_preview, place_magnifier
from cardcrop.utils.config_loader import load_config

CONTAINER_SIZE = Size(600, 800)

CORNER_LABELS = {
    CornerRole.TOP_LEFT: "Top-Left",
    CornerRole.TOP_RIGHT: "Top-Right",
    CornerRole.BOTTOM_RIGHT: "Bottom-Right",
    CornerRole.BOTTOM_LEFT: "Bottom-Left",
}


# Page configuration
st.set_page_config(
    page_title="Card Crop",
    page_icon="🃏",
    layout="wide"
)

st.title("🃏 Card Crop")
st.markdown("Straighten a photographed card by placing its four corners")


@st.cache_resource
def get_config():
    return load_config()


config = get_config()


def open_session(uploaded_file):
    """Start a new crop session for an uploaded file."""
    pil_img = Image.open(BytesIO(uploaded_file.getvalue()))
    source = from_pil(pil_img)
    st.session_state.crop_session = CropSession(source, CONTAINER_SIZE, config.to_dict())
    st.session_state.source_name = uploaded_file.name
    st.session_state.active_corner = CornerRole.TOP_LEFT
    st.session_state.last_click_coords = None
    st.session_state.cropped_image = None


uploaded_file = st.file_uploader(
    "Upload Card Photo",
    type=['png', 'jpg', 'jpeg', 'bmp'],
    help="Photo of a card taken at an angle"
)

if uploaded_file is None:
    st.info("👆 Upload a photo to start")
    st.stop()

if st.session_state.get('source_name') != uploaded_file.name:
    open_session(uploaded_file)

session: CropSession = st.session_state.crop_session
col1, col2 = st.columns([2, 1])

with col1:
    st.markdown("**Click a handle to select it, then click where it should go.**")

    overlay = render_overlay(session)
    magnifier = config.get('crop.magnifier', {})
    zoom = magnifier_preview(
        session,
        magnification=magnifier.get('magnification', 2.0),
        size=magnifier.get('size', 100),
    )
    if zoom is not None:
        # Shown for one render after each move
        place_magnifier(overlay, zoom, session.drag_position, magnifier.get('offset_y', -80))
        session.end_drag()

    clicked = streamlit_image_coordinates(
        cv2.cvtColor(overlay, cv2.COLOR_BGR2RGB),
        key="crop_canvas"
    )

    if clicked is not None:
        current_coords = (clicked['x'], clicked['y'])
        if current_coords != st.session_state.last_click_coords:
            st.session_state.last_click_coords = current_coords
            point = Point2D(float(clicked['x']), float(clicked['y']))
            grabbed = session.hit_test(point)
            if grabbed is not None:
                st.session_state.active_corner = grabbed
            else:
                session.drag(st.session_state.active_corner, point)
            st.rerun()

with col2:
    active = st.radio(
        "Active corner",
        options=list(CORNER_LABELS),
        format_func=CORNER_LABELS.get,
        index=list(CORNER_LABELS).index(st.session_state.active_corner),
    )
    st.session_state.active_corner = active

    with st.expander("Corner positions"):
        for role, point in session.corners.items():
            st.text(f"{CORNER_LABELS[role]}: ({point.x:.1f}, {point.y:.1f})")

    if not session.convex:
        st.warning("⚠️ Please adjust the points to form a convex shape.")

    reset_col, done_col = st.columns(2)
    with reset_col:
        if st.button("Reset"):
            session.reset()
            st.session_state.cropped_image = None
            st.rerun()
    with done_col:
        if st.button("Done", type="primary", disabled=not session.convex):
            result = session.commit()
            if result is None:
                st.error("❌ Could not crop the image. Adjust the corners and try again.")
            st.session_state.cropped_image = result

    cropped = st.session_state.get('cropped_image')
    if cropped is not None:
        st.success("✅ Card straightened")
        st.image(cv2.cvtColor(cropped.pixels, cv2.COLOR_BGR2RGB), caption="Result", use_container_width=True)
        quality = config.get('output.jpeg_quality', 92)
        output_format = config.get('output.format', '.jpg')
        st.download_button(
            "📥 Download",
            data=encode_image(cropped, output_format, quality),
            file_name=f"{uploaded_file.name.rsplit('.', 1)[0]}_cropped{output_format}",
            mime="image/png" if output_format == ".png" else "image/jpeg",
        )
