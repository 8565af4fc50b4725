"""Settings manager with automatic sponsor-count based scaling support."""

from typing import Any


class SettingsManager:
    """Manages settings with automatic count-based value selection.

    Supports settings that can have different values based on how many
    sponsors are drawn. If a setting value is a dict with numeric keys and/or
    'default', the value for the largest numeric key not above the sponsor
    count is selected, falling back to 'default'.
    """

    def __init__(self, settings_dict: dict, num_items: int = 0):
        """Initialize settings manager.

        Args:
            settings_dict: Dictionary of settings (merged common and layout sections)
            num_items: Number of sponsors drawn (for count-based scaling)
        """
        self.settings = settings_dict
        self.num_items = num_items

    def _select(self, value: dict, default: Any) -> Any:
        thresholds = sorted(k for k in value.keys() if isinstance(k, int) and k <= self.num_items)
        if thresholds:
            return value[thresholds[-1]]
        return value.get('default', default)

    def get(self, path: str, default: Any = None) -> Any:
        """Get setting value with automatic count-based override.

        Args:
            path: Dot-notation path like 'text.font_scale' or 'page.dpi'
            default: Default value if path not found

        Returns:
            Setting value. If value is dict with numeric/default keys, returns
            the count-specific value, otherwise returns value as-is.
        """
        keys = path.split('.')
        value = self.settings

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        if isinstance(value, dict) and ('default' in value or any(isinstance(k, int) for k in value.keys())):
            return self._select(value, default)

        return value
