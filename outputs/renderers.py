"""
Output Renderers
把 ViewState / 统计结果渲染到 Rich 控制台
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from aggregator import QuestionStatistics
from aggregator.statistics import format_ranking
from config import SageSettings, get_settings
from core import ViewState, ViewStatus
from models import Question


def _truncate_text(value: str, max_len: int = 80) -> str:
    text = re.sub(r"\s+", " ", str(value or "")).strip()
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _facet_label(facet: str) -> str:
    return facet.replace("_", " ").upper()


def question_url(question: Question, settings: Optional[SageSettings] = None) -> str:
    settings = settings or get_settings().sage
    return settings.question_url_template.format(id=question.id or "")


def format_question_meta(question: Question) -> List[str]:
    """
    问题卡片上的元信息, 缺失的字段直接省略
    """
    meta: List[str] = []
    if question.owner_name:
        meta.append(f"👤 {question.owner_name}")
    if question.creation_date:
        meta.append(f"📅 {question.creation_date.date().isoformat()}")
    if question.score is not None:
        meta.append(f"⭐ {question.score}")
    if question.view_count is not None:
        meta.append(f"👁️ {question.view_count} views")
    count = len(question.answers)
    accepted = " ✓" if question.has_accepted_answer else ""
    meta.append(f"💬 {count} answer{'s' if count != 1 else ''}{accepted}")
    if question.tag_names:
        meta.append(f"🏷️ {', '.join(question.tag_names)}")
    return meta


def summary_line(state: ViewState) -> str:
    line = f"{len(state.questions)} total questions | {len(state.filtered)} shown"
    if state.pages_loaded > 1:
        line += f" | Loaded {state.pages_loaded} pages"
    return line


def render_filters(state: ViewState) -> Optional[RenderableType]:
    facets = state.facets
    if not facets:
        return None

    active = state.active_filter_count
    title = f"Filters ({active} active)" if active else "Filters"
    if not state.filters_open:
        return Text(f"▶ {title}", style="bold")

    table = Table(title=f"▼ {title}", show_header=True, expand=False)
    table.add_column("Facet", style="cyan", no_wrap=True)
    table.add_column("Selected")
    table.add_column("Values")
    for facet, values in facets.items():
        selected = state.filters.get(facet, "All")
        table.add_row(_facet_label(facet), selected, _truncate_text(", ".join(values), max_len=60))
    return table


def render_questions(questions: List[Question], settings: Optional[SageSettings] = None) -> Table:
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("Title", ratio=3)
    table.add_column("Details", ratio=3)
    table.add_column("Link", ratio=2, overflow="fold")
    for question in questions:
        table.add_row(
            _truncate_text(question.title or "Untitled Question"),
            " · ".join(format_question_meta(question)),
            question_url(question, settings),
        )
    return table


def render_state(state: ViewState, settings: Optional[SageSettings] = None) -> RenderableType:
    """
    渲染完整视图; 相同的 state 总是得到相同的输出
    """
    if state.status == ViewStatus.LOADING:
        return Text(state.progress or "Loading questions...", style="yellow")

    if state.status == ViewStatus.ERROR:
        return Panel(Text(state.error or "Unknown error", style="bold red"), title="Error", border_style="red")

    if not state.questions:
        return Text("No questions loaded yet" if state.status == ViewStatus.IDLE else "No questions found")

    parts: List[RenderableType] = []
    filters = render_filters(state)
    if filters is not None:
        parts.append(filters)

    if not state.filtered:
        parts.append(Text("No questions match the current filters"))
    else:
        parts.append(Text(summary_line(state), style="bold"))
        parts.append(render_questions(list(state.filtered), settings))
    return Group(*parts)


def render_statistics(stats: Optional[QuestionStatistics]) -> RenderableType:
    if stats is None:
        return Text("Load questions to see statistics")

    overview = Table.grid(padding=(0, 2))
    overview.add_column(style="bold")
    overview.add_column()
    overview.add_row("Total Questions", str(stats.total_questions))
    overview.add_row("Questions with Answers", f"{stats.with_answers} ({stats.answered_pct:.1f}%)")
    overview.add_row("Questions with Accepted Answer", f"{stats.with_accepted_answer} ({stats.accepted_pct:.1f}%)")
    overview.add_row("Total Views", f"{stats.total_views:,}")
    overview.add_row("Total Score", str(stats.total_score))
    overview.add_row("Avg Answers per Question", f"{stats.avg_answers_per_question:.2f}")
    overview.add_row("Avg Views per Question", f"{stats.avg_views_per_question:.1f}")
    overview.add_row("Avg Score per Question", f"{stats.avg_score_per_question:.2f}")
    overview.add_row("Unique Contributors", str(stats.unique_owners))
    overview.add_row("Unique Tags", str(stats.unique_tags))

    owners = Text("\n".join(format_ranking(stats.top_owners)) or "-")
    tags = Text("\n".join(format_ranking(stats.top_tags)) or "-")
    return Group(
        Panel(overview, title="📈 Overview"),
        Panel(owners, title="👥 Top 10 Contributors"),
        Panel(tags, title="🏷️ Top 10 Tags"),
    )


class ConsoleRenderer:
    """
    ViewController 的渲染出口: 每次状态变化整体重绘一次
    """

    def __init__(self, console: Optional[Console] = None, settings: Optional[SageSettings] = None, **console_kwargs: Any):
        self.console = console or Console(**console_kwargs)
        self.settings = settings
        self._last_progress: Optional[str] = None

    def __call__(self, state: ViewState) -> None:
        if state.status == ViewStatus.LOADING:
            # 进度只在变化时打印一行
            if state.progress != self._last_progress:
                self._last_progress = state.progress
                self.console.print(render_state(state, self.settings))
            return
        self._last_progress = None
        self.console.print(render_state(state, self.settings))
