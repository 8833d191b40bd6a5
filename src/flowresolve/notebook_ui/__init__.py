from .renderers import (
    RenderResult,
    render_plan,
    render_error,
)

__all__ = [
    "RenderResult",
    "render_plan",
    "render_error",
]
