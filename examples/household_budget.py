"""Example pipeline: monthly spending by category, rendered to SVG."""

from pathlib import Path

from stacked_bar_chart import ChartConfig, parse_chart, render_chart, validate

TEXT = """
{
  "title": "Household spending",
  "axis_title": "EUR",
  "category_axis_title": "Month",
  "categories": [
    {"name": "January", "segments": {"Rent": 950, "Food": 410, "Transport": 120, "Leisure": 90}},
    {"name": "February", "segments": {"Rent": 950, "Food": 380, "Transport": 135}},
    {"name": "March", "segments": {"Rent": 950, "Food": 455, "Transport": 110, "Leisure": 240}},
    {"name": "April", "segments": {"Rent": 980, "Food": 400, "Leisure": 60, "Transport": 0}}
  ]
}
"""


def main() -> None:
    base = ChartConfig(canvas_width=720, canvas_height=420, legend_position="bottom")
    parsed = parse_chart(TEXT, base)
    validate(parsed.chart, parsed.config)

    result = render_chart(parsed.chart, parsed.config)
    scale = result.scale
    print(f"Scale: 0..{scale.format_tick(scale.maximum)} ({scale.tick_count} steps of {scale.format_tick(scale.step)})")
    print(f"Plot area: {result.layout.plot}")
    print("Bars:")
    for bar in result.layout.bars:
        parts = ", ".join(f"{seg.name}={seg.rect.height:.1f}px" for seg in bar.segments)
        print(f"  {bar.category}: {parts}")
    print("Colors:")
    for name, color in result.colors.items():
        print(f"  {name}: {color}")

    output = Path(__file__).with_suffix(".svg")
    output.write_text(result.to_svg(pretty=True), encoding="utf-8")
    print(f"Wrote {output}")


if __name__ == "__main__":
    main()
