"""Core constants shared across the layout engine and configuration helpers."""

VALID_LAYOUT_STYLES = ("grid", "size-ordered", "amount-ordered", "word-cloud")
LAYOUT_STYLE_ALIASES = {
    "cloud": "word-cloud",
    "list": "size-ordered",
    "ordered": "grid",
    "sections": "grid",
}
FALLBACK_LAYOUT_STYLE = "amount-ordered"

VALID_CAMPAIGN_TYPES = ("fixed", "positional", "pay-what-you-want")
VALID_DISPLAY_TYPES = ("text-only", "logo-only", "both")
VALID_SPONSOR_TYPES = ("text", "logo")
VALID_APPROVAL_STATUSES = ("pending", "approved", "rejected")
VALID_PAYMENT_STATUSES = ("pending", "paid", "failed")
VALID_ARRANGEMENTS = ("horizontal", "vertical")

DISPLAY_SIZE_RANK = {
    "small": 1,
    "medium": 2,
    "large": 3,
    "xlarge": 4,
}
DEFAULT_DISPLAY_SIZE = "medium"

DEFAULT_FONT_SIZE = 16
DEFAULT_LOGO_WIDTH = 100
DEFAULT_AMOUNT = 0.0
DEFAULT_BASE_SIZE = 20

LOGO_ASPECT = 0.8
LOGO_PADDING = 16
LOGO_WITH_NAME_MIN_WIDTH = 60
LOGO_WITH_NAME_GAP = 12
CAPTION_FONT_SIZE = 12
CAPTION_LINE_HEIGHT = 1.2
CAPTION_MAX_LINES = 2
TEXT_CHAR_WIDTH = 0.6
TEXT_MIN_CHARS = 3
TEXT_LINE_HEIGHT = 1.5

DEFAULT_SPIRAL_SETTINGS = {
    "angle_step": 0.4,
    "radius_step": 4.0,
    "jitter_amplitude": 8.0,
    "jitter_frequency": 0.7,
    "vertical_compression": 0.6,
    "max_attempts": 2000,
    "collision_padding": 6.0,
    "margin_x": 10.0,
    "margin_y": 20.0,
    "first_start_radius": 0.0,
    "start_radius": 5.0,
    "fallback_angle_step": 0.7,
    "fallback_base_radius": 50.0,
    "fallback_radius_step": 20.0,
    "default_container_width": 600.0,
    "min_container_height": 800.0,
    "height_per_sponsor": 60.0,
}
# (minimum max base size, centre height fraction), checked in order.
CENTER_Y_STEPS = ((24, 0.35), (20, 0.33))
DEFAULT_CENTER_Y_PERCENT = 0.31
VARYING_SIZE_THRESHOLD = 5

DEFAULT_SIZE_TIERS = (
    {"size": "small", "min_amount": 5, "max_amount": 24, "text_font_size": 12, "logo_width": 40},
    {"size": "medium", "min_amount": 25, "max_amount": 49, "text_font_size": 16, "logo_width": 60},
    {"size": "large", "min_amount": 50, "max_amount": 99, "text_font_size": 20, "logo_width": 80},
    {"size": "xlarge", "min_amount": 100, "max_amount": None, "text_font_size": 28, "logo_width": 120},
)

DEFAULT_RUNTIME_PATHS = {
    "out_dir": "output",
    "settings_file": "gyb_plot/settings.yaml",
}
DEFAULT_GRID_SETTINGS = {
    "max_columns": 4,
    "pwyw_grid_columns": 3,
}

EMPTY_STATE_MESSAGE = "No sponsors yet. Be the first!"
