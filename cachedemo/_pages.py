from __future__ import annotations

from html import escape
from typing import List, Tuple

from cachedemo._strategies import STRATEGIES, Strategy, group_by_section

# (path, title, description)
UTILITY_LINKS: Tuple[Tuple[str, str, str], ...] = (
    ("/update-data", "Update Server Data", "Increment counter to test cache invalidation"),
    ("/force-error", "Force Server Error", "Simulate server error for SIE testing"),
    ("/api/status", "Server Status", "Current counter, version and uptime"),
)

_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Cache Control Demo</title>
  <style>
    body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }}
    .demo-link {{ display: block; padding: 10px; margin: 10px 0; background: #f0f0f0; text-decoration: none; border-radius: 5px; }}
    .demo-link:hover {{ background: #e0e0e0; }}
    .description {{ color: #666; font-size: 14px; margin-top: 5px; }}
  </style>
</head>
<body>
  <h1>Cache Control Mechanisms Demo</h1>
  <p>This demo showcases different HTTP caching strategies. Open your browser's developer tools (Network tab) to observe caching behavior.</p>
{sections}
</body>
</html>
"""


def _link(path: str, title: str, description: str) -> str:
    return (
        f'  <a href="{escape(path)}" class="demo-link">\n'
        f"    <strong>{escape(title)}</strong>\n"
        f'    <div class="description">{escape(description)}</div>\n'
        f"  </a>"
    )


def _section(heading: str, links: List[str]) -> str:
    return "\n".join([f"  <h2>{escape(heading)}</h2>", *links])


def render_index(strategies: Tuple[Strategy, ...] = STRATEGIES) -> str:
    sections = [
        _section(heading, [_link(s.path, s.title, s.description) for s in members])
        for heading, members in group_by_section(strategies).items()
    ]
    sections.append(_section("Utilities", [_link(*link) for link in UTILITY_LINKS]))
    return _PAGE.format(sections="\n\n".join(sections))
