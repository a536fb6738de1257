"""Shared Plotly plotting helpers."""
import numpy as np
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from coursekit.constants import IRIS_LABELS, MTCARS_LABELS, TUFTE_COLORS

DEFAULT_LABELS = {**MTCARS_LABELS, **IRIS_LABELS}


def apply_common_layout(fig, title=None, height=500):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template="plotly_white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
    )
    return fig


def _labels(labels):
    lab = {**(labels or {})}
    for k, v in DEFAULT_LABELS.items():
        lab.setdefault(k, v)
    return lab


def line_chart(df, x, y, color=None, title=None, labels=None, height=500, color_map=None):
    """Create a line chart."""
    fig = px.line(df, x=x, y=y, color=color, color_discrete_map=color_map,
                  labels=_labels(labels), title=title)
    return apply_common_layout(fig, title, height)


def scatter_chart(df, x, y, color=None, title=None, labels=None, height=500, opacity=0.8, color_map=None):
    """Create a scatter plot."""
    fig = px.scatter(df, x=x, y=y, color=color, color_discrete_map=color_map,
                     labels=_labels(labels), title=title, opacity=opacity)
    return apply_common_layout(fig, title, height)


def histogram_chart(df, x, color=None, title=None, nbins=30, labels=None, height=500, color_map=None):
    """Create an overlaid histogram."""
    fig = px.histogram(df, x=x, color=color, color_discrete_map=color_map,
                       nbins=nbins, labels=_labels(labels), title=title, barmode="overlay",
                       opacity=0.7)
    return apply_common_layout(fig, title, height)


def box_chart(df, x, y, color=None, title=None, labels=None, height=500, color_map=None, points="outliers"):
    """Create a box plot."""
    fig = px.box(df, x=x, y=y, color=color, color_discrete_map=color_map,
                 labels=_labels(labels), title=title, points=points)
    return apply_common_layout(fig, title, height)


def bar_chart(df, x, fill, position="stack", title=None, labels=None, height=500, color_map=None):
    """Count bars of x split by fill; position is 'stack', 'dodge' or 'fill'."""
    counts = df.groupby([x, fill], observed=True).size().rename("count").reset_index()
    y = "count"
    if position == "fill":
        counts["proportion"] = counts["count"] / counts.groupby(x, observed=True)["count"].transform("sum")
        y = "proportion"
    elif position not in ("stack", "dodge"):
        raise ValueError(f"position must be 'stack', 'dodge' or 'fill', not {position!r}")
    counts[x] = counts[x].astype(str)
    counts[fill] = counts[fill].astype(str)
    fig = px.bar(counts, x=x, y=y, color=fill, color_discrete_map=color_map,
                 labels=_labels(labels), title=title,
                 barmode="group" if position == "dodge" else "relative")
    if position == "fill":
        fig.update_yaxes(tickformat=".0%")
    return apply_common_layout(fig, title, height)


def dynamite_chart(summary, x, title=None, height=450, color="#457B9D"):
    """Mean bars with ±sd error bars, from stats_helpers.mean_sd_summary."""
    fig = go.Figure(go.Bar(
        x=summary[x].astype(str), y=summary["mean"],
        marker_color=color, opacity=0.8,
        error_y=dict(type="data", symmetric=False,
                     array=summary["ymax"] - summary["mean"],
                     arrayminus=summary["mean"] - summary["ymin"]),
    ))
    return apply_common_layout(fig, title, height)


def density_chart(densities, value, group, stacked=False, title=None, height=450, color_map=None):
    """Plot curves from stats_helpers.group_densities, optionally stacked."""
    fig = go.Figure()
    for name, sub in densities.groupby(group, observed=True, sort=False):
        color = (color_map or {}).get(str(name))
        fig.add_trace(go.Scatter(
            x=sub[value], y=sub["density"], mode="lines", name=str(name),
            line=dict(color=color, width=1.5),
            fill="tonexty" if stacked else "tozeroy",
            stackgroup="densities" if stacked else None,
            opacity=0.6,
        ))
    fig.update_layout(xaxis_title=DEFAULT_LABELS.get(value, value), yaxis_title="Density")
    return apply_common_layout(fig, title, height)


def heatmap_chart(data, x_label="", y_label="", title=None, height=500, color_scale="RdBu_r", zmid=None):
    """Create a heatmap from a 2D array or DataFrame."""
    fig = go.Figure(data=go.Heatmap(
        z=data.values if hasattr(data, 'values') else data,
        x=data.columns.tolist() if hasattr(data, 'columns') else None,
        y=data.index.tolist() if hasattr(data, 'index') else None,
        colorscale=color_scale,
        zmid=zmid,
    ))
    fig.update_layout(xaxis_title=x_label, yaxis_title=y_label)
    return apply_common_layout(fig, title, height)


def mosaic_chart(rects, x, fill, color="residual", title=None, height=550):
    """Draw mosaic_data rectangles; colour by Pearson residual (diverging) or by fill level."""
    fig = go.Figure()
    lim = max(abs(rects["residual"]).max(), 1e-9)
    for _, r in rects.iterrows():
        xs = [r["xmin"], r["xmax"], r["xmax"], r["xmin"], r["xmin"]]
        ys = [r["ymin"], r["ymin"], r["ymax"], r["ymax"], r["ymin"]]
        shade = px.colors.sample_colorscale("RdBu_r", [(r["residual"] / lim + 1) / 2])[0]
        fig.add_trace(go.Scatter(
            x=xs, y=ys, mode="lines", fill="toself", fillcolor=shade,
            line=dict(color="white", width=1), showlegend=False,
            hovertemplate=(f"{x}: {r[x]}<br>{fill}: {r[fill]}<br>n = {r['count']}"
                           f"<br>residual = {r['residual']:.2f}<extra></extra>"),
        ))
    # Invisible marker carries the colour bar
    fig.add_trace(go.Scatter(
        x=[None], y=[None], mode="markers", showlegend=False,
        marker=dict(colorscale="RdBu_r", cmin=-lim, cmax=lim, color=[0],
                    colorbar=dict(title="Residual"), showscale=True),
    ))
    first_col = rects[rects[x] == rects[x].iloc[0]]
    tops = rects.drop_duplicates(x)
    fig.update_layout(
        xaxis=dict(title=f"{x} (column width = share of respondents)", range=[0, 100],
                   tickvals=tops["xtext"], ticktext=tops[x].astype(str)),
        yaxis=dict(title=f"{fill} (%)", range=[0, 100],
                   tickvals=first_col["ytext"], ticktext=first_col[fill].astype(str)),
    )
    return apply_common_layout(fig, title, height)


def _closed(poly):
    poly = np.asarray(poly)
    return np.vstack([poly, poly[:1]]) if len(poly) else poly


def bagplot_chart(bag, title=None, labels=("x", "y"), height=550, show_hull=False):
    """Layered bag plot: loop, bag, depth median and outliers."""
    fig = go.Figure()
    if show_hull:
        hull = _closed(bag.hull)
        fig.add_trace(go.Scatter(x=hull[:, 0], y=hull[:, 1], mode="lines", name="Hull",
                                 line=dict(color="#999999", dash="dot")))
    loop = _closed(bag.loop)
    fig.add_trace(go.Scatter(x=loop[:, 0], y=loop[:, 1], mode="lines", fill="toself", name="Loop",
                             fillcolor="rgba(69,123,157,0.15)", line=dict(color="#457B9D")))
    inner = _closed(bag.bag)
    fig.add_trace(go.Scatter(x=inner[:, 0], y=inner[:, 1], mode="lines", fill="toself", name="Bag",
                             fillcolor="rgba(69,123,157,0.45)", line=dict(color="#1D3557")))
    inside = bag.data[bag.inside(bag.data, region="fence")]
    fig.add_trace(go.Scatter(x=inside[:, 0], y=inside[:, 1], mode="markers", name="Data",
                             marker=dict(color="#1D3557", size=5, opacity=0.6)))
    fig.add_trace(go.Scatter(x=bag.outliers[:, 0], y=bag.outliers[:, 1], mode="markers", name="Outliers",
                             marker=dict(color="#E63946", size=8, symbol="x")))
    fig.add_trace(go.Scatter(x=[bag.center[0]], y=[bag.center[1]], mode="markers", name="Depth median",
                             marker=dict(color="#E63946", size=12, symbol="star")))
    fig.update_layout(xaxis_title=DEFAULT_LABELS.get(labels[0], labels[0]),
                      yaxis_title=DEFAULT_LABELS.get(labels[1], labels[1]))
    return apply_common_layout(fig, title, height)


def ternary_chart(df, a, b, c, color=None, title=None, height=550, color_map=None, continuous=False):
    """Ternary scatter of a three-part composition."""
    kwargs = {"color_continuous_scale": "Viridis"} if continuous else {"color_discrete_map": color_map}
    fig = px.scatter_ternary(df, a=a, b=b, c=c, color=color, title=title, **kwargs)
    fig.update_traces(marker=dict(size=6, opacity=0.75))
    return apply_common_layout(fig, title, height)


def facet_line_chart(df, x, y, facet, ncols=4, title=None, height=None, color=TUFTE_COLORS["record_low"]):
    """One small line panel per facet value (facet_wrap)."""
    n_facets = df[facet].nunique()
    rows = int(np.ceil(n_facets / ncols))
    fig = px.line(df, x=x, y=y, facet_col=facet, facet_col_wrap=ncols,
                  facet_row_spacing=0.04, facet_col_spacing=0.03)
    fig.update_traces(line=dict(color=color, width=1))
    fig.for_each_annotation(lambda ann: ann.update(text=ann.text.split("=")[-1]))
    return apply_common_layout(fig, title, height or max(300, 180 * rows))


def multi_subplot(rows, cols, subplot_titles=None, shared_xaxes=False, shared_yaxes=False):
    """Create a subplot figure."""
    fig = make_subplots(rows=rows, cols=cols, subplot_titles=subplot_titles,
                        shared_xaxes=shared_xaxes, shared_yaxes=shared_yaxes)
    return fig
