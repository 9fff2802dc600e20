from . import parse_chart, render_chart, validate

DEMO = """
{
  "title": "Quarterly revenue",
  "axis_title": "kUSD",
  "categories": [
    {"name": "Q1", "segments": {"A": 10, "B": 5}},
    {"name": "Q2", "segments": {"A": 8, "B": 12}}
  ],
  "style": {"canvas_width": 400, "canvas_height": 300}
}
"""


def run():
    parsed = parse_chart(DEMO)
    validate(parsed.chart, parsed.config)
    result = render_chart(parsed.chart, parsed.config)

    scale = result.scale
    print(f"Scale: 0..{scale.format_tick(scale.maximum)} step {scale.format_tick(scale.step)}")
    for bar in result.layout.bars:
        print(f"  {bar.category}: total={bar.total:g} height={bar.height:.2f}px")
    print("Legend:")
    for name, color in result.colors.items():
        print(f"  {name}: {color}")
    if result.warnings:
        print("Warnings:")
        for warning in result.warnings:
            print(f"  - {warning}")

    print(result.to_svg(pretty=True))


if __name__ == "__main__":
    run()
