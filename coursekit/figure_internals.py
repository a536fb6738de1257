"""Looking inside a built Plotly figure: its layout tree, its traces, post-hoc edits."""
import numpy as np
import pandas as pd


def _walk(node, path, rows):
    if isinstance(node, dict):
        if not node:
            rows.append({"path": path, "kind": "dict", "value": "{}"})
        for key, val in node.items():
            _walk(val, f"{path}.{key}" if path else key, rows)
    elif isinstance(node, (list, tuple)) and node and all(isinstance(v, dict) for v in node):
        for i, val in enumerate(node):
            _walk(val, f"{path}[{i}]", rows)
    else:
        rows.append({"path": path, "kind": type(node).__name__, "value": repr(node)[:60]})


def figure_outline(fig):
    """Every leaf of the layout as (path, kind, value) rows, like listing a grob tree."""
    layout = dict(fig.to_dict().get("layout", {}))
    # The theme template alone holds hundreds of leaves
    layout.pop("template", None)
    rows = []
    _walk(layout, "layout", rows)
    return pd.DataFrame(rows, columns=["path", "kind", "value"])


def trace_summary(fig):
    """One row per trace: position, type, name, number of points, visibility."""
    rows = []
    for i, trace in enumerate(fig.data):
        xs = getattr(trace, "x", None)
        if xs is None:
            xs = getattr(trace, "a", None)
        rows.append({
            "index": i,
            "type": trace.type,
            "name": trace.name,
            "n_points": 0 if xs is None else len(xs),
            "visible": trace.visible if trace.visible is not None else True,
        })
    return pd.DataFrame(rows, columns=["index", "type", "name", "n_points", "visible"])


def restyle_traces(fig, selector=None, **props):
    """Update already-built traces matching selector; returns how many changed."""
    matched = list(fig.select_traces(selector=selector))
    for trace in matched:
        trace.update(**props)
    return len(matched)


def viewport_domains(rows, cols, spacing=0.05):
    """Paper-coordinate domains of a rows x cols grid of panels (top-left first)."""
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be positive")
    width = (1 - spacing * (cols - 1)) / cols
    height = (1 - spacing * (rows - 1)) / rows
    cells = []
    for r in range(rows):
        for c in range(cols):
            x0 = c * (width + spacing)
            y1 = 1 - r * (height + spacing)
            cells.append({
                "row": r + 1, "col": c + 1,
                "x0": round(x0, 10), "x1": round(x0 + width, 10),
                "y0": round(y1 - height, 10), "y1": round(y1, 10),
            })
    return pd.DataFrame(cells)


def add_panel_label(fig, text, x=0.01, y=0.99, **font):
    """Add a label in paper coordinates after the figure has been built."""
    fig.add_annotation(
        text=text, x=x, y=y, xref="paper", yref="paper",
        showarrow=False, xanchor="left", yanchor="top",
        font=dict(size=font.pop("size", 14), **font),
    )
    return fig


def data_ranges(fig):
    """Observed x/y range of every trace, the numbers the axes are trained on."""
    def numeric(values):
        if values is None:
            return np.array([], dtype=float)
        return pd.to_numeric(pd.Series(list(values)), errors="coerce").to_numpy(dtype=float)

    rows = []
    for i, trace in enumerate(fig.data):
        x = numeric(getattr(trace, "x", None))
        y = numeric(getattr(trace, "y", None))
        rows.append({
            "index": i,
            "x_min": np.nanmin(x) if x.size else np.nan,
            "x_max": np.nanmax(x) if x.size else np.nan,
            "y_min": np.nanmin(y) if y.size else np.nan,
            "y_max": np.nanmax(y) if y.size else np.nan,
        })
    return pd.DataFrame(rows)
