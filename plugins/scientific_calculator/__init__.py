"""Scientific Calculator plugin manifest."""

manifest = {
    "title": "Scientific Calculator",
    "summary": (
        "Evaluate arithmetic in basic, advanced (degree/radian trig, logs, roots) "
        "and metric conversion modes with history and a memory register."
    ),
    "category": "General Utilities",
    "blueprint": "scientific_calculator",
    "api_prefix": "/api/scientific_calculator",
}

__all__ = ["manifest"]
