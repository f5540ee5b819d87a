import html
import json

import streamlit.components.v1 as components

NAV_CLASS = "catalog-nav"
SPY_OFFSET = 100

NAV_CSS = """
<style>
  .catalog-nav {position: sticky; top: 3rem; z-index: 10; display: flex; gap: 8px; overflow-x: auto;
    padding: 8px 0; background: var(--background-color, #fff);}
  .catalog-nav a {white-space: nowrap; padding: 4px 12px; border-radius: 999px; text-decoration: none;
    border: 1px solid rgba(0,0,0,0.12);}
  .catalog-nav a.active {background: #6366f1; color: #fff; border-color: #6366f1;}
</style>
"""


def section_anchor(category: dict) -> str:
    return f"cat-{category.get('id')}"


def nav_html(sections: list, active_id=None) -> str:
    links = []
    for category, _ in sections:
        label = html.escape(f"{category.get('emoji') or ''} {category.get('name') or ''}".strip())
        cls = ' class="active"' if category.get("id") == active_id else ""
        links.append(f'<a href="#{section_anchor(category)}"{cls}>{label}</a>')
    return NAV_CSS + f'<nav class="{NAV_CLASS}">' + "".join(links) + "</nav>"


def scrollspy_script(anchor_ids: list, offset: int = SPY_OFFSET) -> str:
    """Browser-side scroll listener for the host page.

    Highlights the nav entry whose section box straddles `offset` px from the
    viewport top. The listener is removed when this frame goes away.
    """
    ids = json.dumps(list(anchor_ids))
    return f"""
<script>
(function () {{
  const host = window.parent;
  const doc = host.document;
  const ids = {ids};
  const offset = {int(offset)};
  function update() {{
    // a section spans from its anchor to the next one
    const tops = [];
    for (const id of ids) {{
      const el = doc.getElementById(id);
      if (el) tops.push([id, el.getBoundingClientRect().top]);
    }}
    let current = null;
    for (let i = 0; i < tops.length; i++) {{
      const bottom = i + 1 < tops.length ? tops[i + 1][1] : Infinity;
      if (tops[i][1] <= offset && bottom > offset) {{ current = tops[i][0]; break; }}
    }}
    if (!current) return;
    doc.querySelectorAll('.{NAV_CLASS} a').forEach(function (a) {{
      a.classList.toggle('active', a.getAttribute('href') === '#' + current);
    }});
  }}
  const scroller = doc.querySelector('section.main') || doc.querySelector('[data-testid="stMain"]') || host;
  scroller.addEventListener('scroll', update, {{passive: true}});
  host.addEventListener('scroll', update, {{passive: true}});
  function teardown() {{
    scroller.removeEventListener('scroll', update);
    host.removeEventListener('scroll', update);
  }}
  window.addEventListener('pagehide', teardown);
  window.addEventListener('unload', teardown);
  update();
}})();
</script>
"""


def render_scrollspy(anchor_ids: list, offset: int = SPY_OFFSET):
    components.html(scrollspy_script(anchor_ids, offset), height=0)
