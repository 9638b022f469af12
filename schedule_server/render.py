import base64
import traceback
from pathlib import Path

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from .config import CANVAS_ASPECT_RATIO, CANVAS_HEIGHT, CANVAS_WIDTH, ICON_DIR, PNG_TIMEOUT, PNG_WIDTH
from .errors import ConversionError
from .layout import format_date_range

# ==============================================================================
# Layout Constants (fractions of the canvas)
# ==============================================================================
HEADER_POSITION = 0.10
DATE_RANGE_POSITION = 0.15
SCHEDULE_START_POSITION = 0.21
SCHEDULE_HEIGHT = 0.73
CONTENT_WIDTH = 0.79
ROW_GAP_PERCENT = 2
BASE_FONT_PX = 16
ICON_SIZE = 20
ROW_PADDING = 10

HEADER_TEXT = "Stream Schedule"
PNG_HTML_TEMPLATE = "<!DOCTYPE html><html><head><style>html,body{{margin:0;padding:0;background:transparent;}}svg{{display:block;width:{width}px;height:{height}px;}}</style></head><body>{svg}</body></html>"


# ==============================================================================
# Helper Function Definitions
# ==============================================================================
def _data_uri(path, mimetype):
    data = Path(path).read_bytes()
    return f"data:{mimetype};base64,{base64.b64encode(data).decode('ascii')}"


def _icon_uri(icon_name):
    if not icon_name:
        return None
    try:
        return _data_uri(ICON_DIR / icon_name, "image/svg+xml")
    except OSError as e:
        print(f"Error loading icon '{icon_name}': {e}")
        return None


def _background_uri(theme):
    if not theme.background_image_path:
        return None
    try:
        return _data_uri(theme.background_image_path, "image/png")
    except OSError as e:
        print(f"Error loading background image: {e}")
        return None


def build_schedule_context(slots, week_start, week_end, theme):
    content_width = CANVAS_WIDTH * CONTENT_WIDTH
    content_x = (CANVAS_WIDTH - content_width) / 2
    block_top = CANVAS_HEIGHT * SCHEDULE_START_POSITION
    block_height = CANVAS_HEIGHT * SCHEDULE_HEIGHT
    row_height = block_height * (100 / len(slots) - ROW_GAP_PERCENT) / 100
    row_step = (block_height - row_height) / (len(slots) - 1) if len(slots) > 1 else 0

    rows = []
    for index, slot in enumerate(slots):
        y = block_top + index * row_step
        rows.append(
            {
                "slot": slot,
                "x": round(content_x, 2),
                "y": round(y, 2),
                "width": round(content_width, 2),
                "height": round(row_height, 2),
                "text_y": round(y + row_height / 2, 2),
                "day_x": round(content_x + ROW_PADDING, 2),
                "summary_x": round(content_x + content_width / 2, 2),
                "time_x": round(content_x + content_width - ROW_PADDING, 2),
                "icon_uri": _icon_uri(slot.icon),
                "icon_x": round(content_x + content_width * 0.25 - ICON_SIZE / 2, 2),
                "icon_y": round(y + (row_height - ICON_SIZE) / 2, 2),
                "summary_font_px": round(slot.font_size * BASE_FONT_PX, 2),
            }
        )

    return {
        "width": CANVAS_WIDTH,
        "height": CANVAS_HEIGHT,
        "theme": theme,
        "header_text": HEADER_TEXT,
        "header_y": round(CANVAS_HEIGHT * HEADER_POSITION, 2),
        "date_range_text": format_date_range(week_start, week_end),
        "date_range_y": round(CANVAS_HEIGHT * DATE_RANGE_POSITION, 2),
        "center_x": CANVAS_WIDTH / 2,
        "base_font_px": BASE_FONT_PX,
        "label_font_px": round(1.2 * BASE_FONT_PX, 2),
        "icon_size": ICON_SIZE,
        "background_uri": _background_uri(theme),
        "rows": rows,
    }


# ==============================================================================
# Rasterizer
# ==============================================================================
def svg_to_png(svg_text, width=PNG_WIDTH):
    if not svg_text or "<svg" not in svg_text:
        raise ConversionError("Request body must contain SVG markup")
    height = round(width / CANVAS_ASPECT_RATIO)
    html_string = PNG_HTML_TEMPLATE.format(width=width, height=height, svg=svg_text)
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                context = browser.new_context(device_scale_factor=1)
                page = context.new_page()
                page.set_viewport_size({"width": width, "height": height})
                page.set_content(html_string, wait_until="load", timeout=PNG_TIMEOUT)
                return page.screenshot(type="png", omit_background=True)
            finally:
                browser.close()
    except PlaywrightError as e:
        print(f"  Playwright Error during SVG to PNG conversion: {e}")
        traceback.print_exc()
        raise ConversionError(f"SVG to PNG conversion failed: {e}") from e
