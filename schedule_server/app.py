import traceback

from flask import Flask, Response, jsonify, render_template, request

from .calendar_feed import process_calendar_request
from .config import HOST, PORT, get_theme
from .errors import ConversionError, ScheduleError
from .layout import build_week_layout
from .render import build_schedule_context, svg_to_png
from .text_format import format_events, format_grouped, group_events_by_location

TRUTHY_VALUES = {"1", "true", "yes", "on"}

# ==============================================================================
# App Initialization
# ==============================================================================
app = Flask(__name__)


# ==============================================================================
# Error Handlers
# ==============================================================================
@app.errorhandler(ScheduleError)
def handle_schedule_error(error):
    print(f"Error processing {request.path}: {error.message}")
    return error.message, error.status_code, {"Content-Type": "text/plain; charset=utf-8"}


# ==============================================================================
# Flask Routes
# ==============================================================================
@app.route("/")
def default_route():
    return "Schedule Card Server OK", 200, {"Content-Type": "text/plain"}


@app.route("/events")
@app.route("/api/fetch-calendar-events")
def events_route():
    events, _ = process_calendar_request(request.args)
    return jsonify({"events": [event.to_dict() for event in events]})


@app.route("/schedule-svg")
@app.route("/api/fetch-calendar-svg")
def schedule_svg_route():
    events, window = process_calendar_request(request.args)
    theme = get_theme(request.args.get("theme"))
    slots = build_week_layout(events, window.start, window.end, theme)
    svg = render_template("schedule.svg", **build_schedule_context(slots, window.start, window.end, theme))
    return Response(svg, mimetype="image/svg+xml")


@app.route("/schedule-text")
@app.route("/api/fetch-calendar-text")
def schedule_text_route():
    events, _ = process_calendar_request(request.args)
    if request.args.get("grouped", "").strip().lower() in TRUTHY_VALUES:
        sections = group_events_by_location(events)
        return jsonify({"result": format_grouped(events), "sections": [{"name": name, "value": value} for name, value in sections]})
    return jsonify({"result": format_events(events, request.args.get("format"))})


@app.route("/svg-to-png", methods=["POST"])
@app.route("/api/svg-to-png", methods=["POST"])
def svg_to_png_route():
    try:
        png_bytes = svg_to_png(request.get_data(as_text=True))
    except ConversionError as e:
        print(f"Error converting SVG to PNG: {e.message}")
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        print(f"Unexpected error converting SVG to PNG: {e}")
        traceback.print_exc()
        return jsonify({"error": str(e) or "Unknown error occurred"}), 500
    return Response(png_bytes, mimetype="image/png")


# ==============================================================================
# Main Execution Block (for Development & Gunicorn)
# ==============================================================================
if __name__ == "__main__":
    print("-" * 60)
    print("Starting Flask development server...")
    print(f"  Events: http://127.0.0.1:{PORT}/events?url=...&startDate=...&endDate=...")
    print(f"  SVG:    http://127.0.0.1:{PORT}/schedule-svg?url=...&startDate=...&endDate=...")
    print(f"  Text:   http://127.0.0.1:{PORT}/schedule-text?url=...&startDate=...&endDate=...")
    print("Note: Use a WSGI server (e.g., Gunicorn) for production deployments.")
    print("-" * 60)
    app.run(debug=True, host=HOST, port=PORT, use_reloader=True)
