# File: doc_scout/report/__init__.py
"""doc_scout.report: Запись результатов обхода на диск."""

from doc_scout.report.sink import ContentSink, escape_special_chars, rejection_reason, wrap_text

__all__ = ["ContentSink", "escape_special_chars", "rejection_reason", "wrap_text"]
