from __future__ import annotations

from nicegui import ui

# Slate palette of the mobile client
PALETTE: dict[str, str] = {
    "background": "#0f172a",
    "surface": "#1e293b",
    "surface_top": "#334155",
    "text": "#e2e8f0",
    "subtle": "#94a3b8",
    "muted": "#64748b",
    "accent": "#38bdf8",
    "positive": "#22c55e",
    "negative": "#ef4444",
    "warning": "#F2C037",
    "info": "#31CCEC",
}


def _inject_css_vars(p: dict[str, str]) -> None:
    """Inject global CSS variables and basic background/text mappings."""
    ui.add_css(
        f"""
:root {{
  --vpn-bg: {p["background"]};
  --vpn-surface: {p["surface"]};
  --vpn-surface-top: {p["surface_top"]};
  --vpn-text: {p["text"]};
  --vpn-subtle: {p["subtle"]};
  --vpn-muted: {p["muted"]};
  --vpn-accent: {p["accent"]};
  --vpn-positive: {p["positive"]};
}}

body, .q-page {{ background: var(--vpn-bg); color: var(--vpn-text); }}
"""
    )


def inject_layout_css() -> None:
    """Card, badge and row styles shared by all screens."""
    ui.add_css(
        """
.q-header { background: var(--vpn-bg); color: var(--vpn-accent); }
.q-card { background: var(--vpn-surface); color: var(--vpn-text); border-radius: 12px; }
.vpn-title { font-size: 28px; font-weight: 700; color: var(--vpn-accent); }
.vpn-screen-title { font-size: 24px; font-weight: 700; color: var(--vpn-text); }
.vpn-muted { color: var(--vpn-muted); }
.vpn-subtle { color: var(--vpn-subtle); }
.vpn-stat-value { font-size: 32px; font-weight: 700; color: var(--vpn-accent); }
.vpn-dot { width: 12px; height: 12px; border-radius: 6px; background: var(--vpn-muted); }
.vpn-dot.on { background: var(--vpn-positive); }
.vpn-row { border: 2px solid transparent; cursor: pointer; }
.vpn-row.active { border-color: var(--vpn-positive); }
.vpn-badge { background: var(--vpn-surface-top); color: var(--vpn-accent); border-radius: 6px; padding: 2px 8px; font-size: 12px; }
.vpn-badge.enabled { background: #22c55e20; color: var(--vpn-text); }
.vpn-badge.disabled { background: #64748b20; color: var(--vpn-text); }
.vpn-glyph { font-size: 20px; width: 24px; text-align: center; }
"""
    )


def apply_theme() -> None:
    """
    Apply the dark slate theme:
    - Set NiceGUI/Quasar colors and dark mode.
    - Inject CSS variables and layout classes.
    """
    ui.colors(
        primary=PALETTE["accent"],
        secondary=PALETTE["surface_top"],
        accent=PALETTE["accent"],
        positive=PALETTE["positive"],
        negative=PALETTE["negative"],
        info=PALETTE["info"],
        warning=PALETTE["warning"],
    )
    ui.dark_mode().enable()
    _inject_css_vars(PALETTE)
    inject_layout_css()
