"""Screen capture assistant for sway/Wayland.

A thin helper around grim, slurp and wf-recorder with:
- Screenshots to file or clipboard
- Video recording with optional audio
- Region/window selection seeded with visible window geometries
"""

__version__ = "0.3.0"
