"""
Outputs Module
输出层 - 问题列表 / 过滤器 / 统计的控制台渲染
"""

from .renderers import (
    ConsoleRenderer,
    format_question_meta,
    question_url,
    render_filters,
    render_questions,
    render_state,
    render_statistics,
    summary_line,
)

__all__ = [
    "ConsoleRenderer",
    "format_question_meta",
    "question_url",
    "render_filters",
    "render_questions",
    "render_state",
    "render_statistics",
    "summary_line",
]
