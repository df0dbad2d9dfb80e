"""Export-Modul: Terminal-Ausgabe der Wochenpläne (Rich)."""

from export.tui_renderer import print_result, render_section_rows, render_week_rows

__all__ = ["print_result", "render_section_rows", "render_week_rows"]
