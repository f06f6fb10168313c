"""
Module: layout.stylesheet

Purpose:
    CSS handed to renderer collaborators: the custom-property map for the
    active configuration and a print stylesheet (plus screen preview) that
    consumes those properties.

Key Functions:
    - css_variables(): Page and typography custom properties
    - print_css(): Complete :root + @media print + @media screen stylesheet

Dependencies:
    - layout.geometry: page_css_variables
    - layout.typography: text_css_variables

Used By:
    - studysheet.layout.engine: LayoutEngine.css_variables / print_css
"""

from __future__ import annotations

from typing import Dict

from .config import LayoutConfig
from .geometry import page_css_variables
from .typography import text_css_variables

_PRINT_RULES = """\
@media print {
  @page {
    size: var(--page-width) var(--page-height);
    margin: var(--margin-top) var(--margin-right) var(--margin-bottom) var(--margin-left);
  }

  .cheat-sheet {
    width: var(--content-width);
    height: var(--content-height);
    font-family: var(--font-family);
    line-height: var(--line-height);
    font-size: var(--font-size-body);
    column-count: var(--column-count);
    column-gap: var(--column-gap);
    column-fill: balance;
  }

  .cheat-sheet h1 {
    font-size: var(--font-size-h1);
    break-after: avoid;
    margin-top: 0;
    margin-bottom: 0.5em;
  }

  .cheat-sheet h2 {
    font-size: var(--font-size-h2);
    break-after: avoid;
    margin-top: 1em;
    margin-bottom: 0.3em;
  }

  .cheat-sheet h3 {
    font-size: var(--font-size-h3);
    break-after: avoid;
    margin-top: 0.8em;
    margin-bottom: 0.2em;
  }

  .cheat-sheet p {
    margin-top: 0;
    margin-bottom: 0.5em;
    break-inside: avoid-column;
  }

  .cheat-sheet ul, .cheat-sheet ol {
    margin-top: 0;
    margin-bottom: 0.5em;
    padding-left: 1.2em;
    break-inside: avoid-column;
  }

  .cheat-sheet li {
    margin-bottom: 0.2em;
  }

  .cheat-sheet table {
    width: 100%;
    border-collapse: collapse;
    margin-bottom: 0.5em;
    font-size: var(--font-size-small);
    break-inside: avoid-column;
  }

  .cheat-sheet th, .cheat-sheet td {
    border: 1px solid #ccc;
    padding: 2px 4px;
    text-align: left;
  }

  .cheat-sheet img {
    max-width: 100%;
    height: auto;
    break-inside: avoid-column;
    margin-bottom: 0.3em;
  }

  .cheat-sheet .caption {
    font-size: var(--font-size-caption);
    font-style: italic;
    margin-top: 0.2em;
    margin-bottom: 0.5em;
  }

  .cheat-sheet p, .cheat-sheet li {
    orphans: 2;
    widows: 2;
  }

  .page-break {
    page-break-before: always;
  }

  .no-break {
    break-inside: avoid;
  }
}
"""

_SCREEN_RULES = """\
@media screen {
  .cheat-sheet-preview {
    width: var(--page-width);
    min-height: var(--page-height);
    margin: 20px auto;
    padding: var(--margin-top) var(--margin-right) var(--margin-bottom) var(--margin-left);
    background: white;
    box-shadow: 0 4px 8px rgba(0, 0, 0, 0.1);
    font-family: var(--font-family);
    line-height: var(--line-height);
    font-size: var(--font-size-body);
    column-count: var(--column-count);
    column-gap: var(--column-gap);
    column-fill: balance;
  }

  .cheat-sheet-preview h1 { font-size: var(--font-size-h1); }
  .cheat-sheet-preview h2 { font-size: var(--font-size-h2); }
  .cheat-sheet-preview h3 { font-size: var(--font-size-h3); }
  .cheat-sheet-preview .caption { font-size: var(--font-size-caption); }
}
"""


def css_variables(config: LayoutConfig) -> Dict[str, str]:
    """
    Page geometry and typography custom properties in one map.

    Example:
        >>> css_variables(LayoutConfig())["--font-size-body"]
        '12px'
    """
    return {**page_css_variables(config.page), **text_css_variables(config.text)}


def print_css(config: LayoutConfig) -> str:
    """Print stylesheet with a :root block of the configuration's variables."""
    declarations = "\n".join(
        f"  {name}: {value};" for name, value in css_variables(config).items()
    )
    return f":root {{\n{declarations}\n}}\n\n{_PRINT_RULES}\n{_SCREEN_RULES}"
