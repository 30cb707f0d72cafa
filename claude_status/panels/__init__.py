from claude_status.panels.activity import agents_panel, todos_panel, tools_panel
from claude_status.panels.limits import five_hour_panel, seven_day_panel, seven_day_sonnet_panel
from claude_status.panels.session import cache_panel, context_panel, cost_panel, model_panel

__all__ = [
    "agents_panel",
    "todos_panel",
    "tools_panel",
    "five_hour_panel",
    "seven_day_panel",
    "seven_day_sonnet_panel",
    "cache_panel",
    "context_panel",
    "cost_panel",
    "model_panel",
]
