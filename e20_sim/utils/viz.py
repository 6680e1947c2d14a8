import plotly.express as px
import pandas as pd

OUTCOMES = ["HIT", "MISS", "SW"]


def export_cache_chart(events, path: str):
    if not events:
        with open(path, "w") as f:
            f.write("<h1>Cache Activity</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(events)
    counts = df.groupby(["level", "outcome"]).size().reset_index(name="count")

    fig = px.bar(
        counts,
        x="level",
        y="count",
        color="outcome",
        barmode="group",
        category_orders={"outcome": OUTCOMES},
        title="E20 Cache Activity",
        labels={"level": "Cache Level", "count": "Accesses", "outcome": "Outcome"}
    )
    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_cache_ascii(stats):
    if not stats:
        return "No cache configured."

    chart = "E20 Cache Summary (H=hit, M=miss, S=store)\n"
    chart += "" + ("-" * 70) + "\n"

    for level in sorted(stats.keys()):
        s = stats[level]
        total = s['hits'] + s['misses'] + s['stores']
        scale = 50.0 / total if total > 0 else 0
        lane = ('H' * int(s['hits'] * scale) + 'M' * int(s['misses'] * scale)
                + 'S' * int(s['stores'] * scale))
        chart += f"{level:>4} |{lane:<50}| hit rate {s['hit_rate']:.2%}\n"

    chart += "" + ("-" * 70) + "\n"
    return chart
