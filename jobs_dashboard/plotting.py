import plotly.graph_objects as go

from .config import CHART_HEIGHT, PRIMARY_COLOR, SECONDARY_COLOR, TROUGH_COLOR
from .render import RenderCommand

# ============================================================
# Configuration / constants
# ============================================================

MARKER_COLORS: dict[str, str] = {
    "peak": PRIMARY_COLOR,
    "trough": TROUGH_COLOR,
}

MARGINS: dict[str, dict[str, int]] = {
    "bar": dict(t=40, r=30, b=60, l=60),
    "line": dict(t=40, r=30, b=60, l=80),
    "hbar": dict(t=40, r=30, b=80, l=120),
    "message": dict(t=40, r=30, b=40, l=30),
}


# ============================================================
# Helper functions
# ============================================================


def _hover_text(command: RenderCommand) -> list[str]:
    return [tip.as_html() for tip in command.hover]


def _bar_colors(command: RenderCommand) -> list[str]:
    """Highlight the annotated (peak) bar; everything else uses the secondary color."""
    return [
        PRIMARY_COLOR if i == command.highlight else SECONDARY_COLOR
        for i in range(len(command.x))
    ]


def _add_markers(fig: go.Figure, command: RenderCommand) -> None:
    for marker in command.markers:
        fig.add_annotation(
            x=marker.x,
            y=marker.y,
            text=f"<b>{marker.text}</b>",
            showarrow=True,
            arrowhead=0,
            arrowwidth=2,
            arrowcolor=MARKER_COLORS[marker.kind],
            ax=0,
            ay=-25,
            font=dict(size=12, color=MARKER_COLORS[marker.kind]),
        )


def _value_range(command: RenderCommand) -> list[float] | None:
    if not command.value_max:
        return None
    return [0, command.value_max]


# ============================================================
# Traces per command kind
# ============================================================


def _bar_figure(command: RenderCommand) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=list(command.x),
            y=list(command.y),
            marker_color=_bar_colors(command),
            opacity=0.8,
            hovertext=_hover_text(command),
            hoverinfo="text",
        )
    )
    fig.update_xaxes(title_text=command.x_title, tickangle=-45, type="category")
    fig.update_yaxes(
        title_text=command.y_title, range=_value_range(command), showgrid=True
    )
    _add_markers(fig, command)
    return fig


def _line_figure(command: RenderCommand) -> go.Figure:
    fig = go.Figure(
        go.Scatter(
            x=list(command.x),
            y=list(command.y),
            mode="lines+markers",
            line=dict(width=3, color=PRIMARY_COLOR, shape="spline"),
            marker=dict(size=8, color=PRIMARY_COLOR),
            hovertext=_hover_text(command),
            hoverinfo="text",
        )
    )
    fig.update_xaxes(
        title_text=command.x_title,
        tickformat="%Y/%m",
        range=list(command.x_range) if command.x_range else None,
    )
    fig.update_yaxes(
        title_text=command.y_title,
        tickformat="$,.0f",
        range=_value_range(command),
        showgrid=True,
    )
    return fig


def _hbar_figure(command: RenderCommand) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=list(command.x),
            y=list(command.y),
            orientation="h",
            marker_color=PRIMARY_COLOR,
            opacity=0.8,
            hovertext=_hover_text(command),
            hoverinfo="text",
        )
    )
    fig.update_xaxes(title_text=command.x_title, range=_value_range(command), showgrid=True)
    # Most frequent title on top
    fig.update_yaxes(title_text=command.y_title, autorange="reversed")
    return fig


def _message_figure(command: RenderCommand) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        text=command.message,
        showarrow=False,
        font=dict(size=14, color="#666666"),
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    return fig


_BUILDERS = {
    "bar": _bar_figure,
    "line": _line_figure,
    "hbar": _hbar_figure,
    "message": _message_figure,
}


# ============================================================
# Main plotting function
# ============================================================


def build_figure(command: RenderCommand) -> go.Figure:
    """
    Build a Plotly figure from a render command.

    Parameters
    ----------
    command : RenderCommand
        Output of :func:`jobs_dashboard.render.present`.

    Returns
    -------
    go.Figure
        Bar chart (postings), line chart (salary), horizontal bar chart
        (titles) or a blank figure carrying a centered message.
    """
    fig = _BUILDERS[command.kind](command)

    fig.update_layout(
        title=dict(text=f"<b>{command.title}</b>", x=0.5, xanchor="center"),
        height=CHART_HEIGHT,
        margin=MARGINS[command.kind],
        plot_bgcolor="#f5f7fb",
        showlegend=False,
    )
    return fig
