from __future__ import annotations

"""
Design tokens (light slate).

Pages use these constants or the wrappers in ``ui_components`` instead of
long inline class strings.
"""

C_FONT_STACK = '"Inter", system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif'
C_NUMERIC = "tabular-nums"

APP_CSS = f"""
<style>
  :root, body, .q-body {{
    font-family: {C_FONT_STACK};
    letter-spacing: -0.01em;
    color-scheme: light;
  }}
  body, .q-body, .nicegui-content {{
    background: #f8fafc !important;
    color: #0f172a !important;
  }}
  [class*="q-elevation--"], .q-card, .q-menu {{
    box-shadow: none !important;
  }}
</style>
"""

STYLE_BG = "bg-slate-50 text-slate-900 min-h-screen"
STYLE_CONTAINER = "w-full max-w-6xl mx-auto px-6 py-6 gap-6"

STYLE_CARD = "bg-white border border-slate-200 shadow-sm rounded-xl"
STYLE_CARD_HOVER = "transition-colors hover:bg-slate-50 hover:border-slate-300"

STYLE_PAGE_TITLE = "text-2xl font-bold tracking-tight text-slate-900"
STYLE_SECTION_TITLE = "text-sm font-semibold text-slate-900"
STYLE_TEXT_MUTED = "text-sm text-slate-600"
STYLE_TEXT_HINT = "text-sm text-slate-400"

STYLE_BTN_PRIMARY = (
    "bg-slate-900 text-white hover:bg-slate-800 active:scale-[0.99] rounded-lg px-4 py-2 text-sm "
    "font-semibold transition-all focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-amber-400/40"
)
STYLE_BTN_SECONDARY = (
    "bg-white text-slate-900 border border-slate-200 hover:bg-slate-50 active:scale-[0.99] rounded-lg px-4 py-2 "
    "text-sm font-semibold transition-all focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-slate-400/30"
)
STYLE_BTN_DANGER = (
    "bg-rose-600 text-white hover:bg-rose-700 active:scale-[0.99] rounded-lg px-4 py-2 text-sm "
    "font-semibold transition-all focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-rose-500/30"
)

STYLE_INPUT = "w-full text-sm"

STYLE_TABLE_HEADER = "w-full px-3 py-2 text-xs font-semibold uppercase tracking-wider text-slate-600 border-b border-slate-200"
STYLE_TABLE_ROW = "w-full px-3 py-2 text-sm text-slate-800 border-b border-slate-200/70"

STYLE_BADGE_GREEN = "bg-emerald-50 text-emerald-700 border border-emerald-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
STYLE_BADGE_BLUE = "bg-sky-50 text-sky-700 border border-sky-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
STYLE_BADGE_GRAY = "bg-slate-100 text-slate-700 border border-slate-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
STYLE_BADGE_YELLOW = "bg-amber-50 text-amber-700 border border-amber-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
STYLE_BADGE_RED = "bg-rose-50 text-rose-700 border border-rose-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"

STYLE_NAV_ITEM = "text-slate-600 hover:text-slate-900 hover:bg-slate-100 rounded-md"
STYLE_NAV_ITEM_ACTIVE = "text-slate-900 bg-slate-100 rounded-md"
