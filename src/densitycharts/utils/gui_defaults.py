"""Default classes and props for the NiceGUI widgets used by the chart controller."""

from __future__ import annotations

from nicegui import ui

from densitycharts.utils.logging import get_logger

logger = get_logger(__name__)

# tailwind text size -> quasar size
_QUASAR_SIZES = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def set_up_gui_defaults(text_size: str = "text-sm") -> None:
    """Apply compact default styling to the control panel elements.

    Args:
        text_size: Tailwind CSS text size class ('text-xs', 'text-sm',
            'text-base' or 'text-lg').

    Raises:
        ValueError: If text_size is not one of the supported classes.
    """
    if text_size not in _QUASAR_SIZES:
        raise ValueError(f"Unsupported text_size {text_size!r}; expected one of {sorted(_QUASAR_SIZES)}")
    text_size_quasar = _QUASAR_SIZES[text_size]

    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{text_size_quasar}')

    ui.label.default_classes(f"{text_size} select-text")
    ui.label.default_props("dense")

    ui.button.default_classes(text_size)
    ui.button.default_props("dense")

    ui.checkbox.default_classes(text_size)
    ui.checkbox.default_props(f"dense size={text_size_quasar}")

    ui.select.default_classes(text_size)
    ui.select.default_props("dense")

    ui.number.default_classes(text_size)
    ui.number.default_props("dense")
