from .console import RichEventPrinter, build_summary_table, render_summary

__all__ = ["RichEventPrinter", "build_summary_table", "render_summary"]
