"""
Example generating a layout for the bundled mortality dataset.
"""

from py_voronoid import LayoutEngine, prepare_sites
from py_voronoid.core.categories import CATEGORIES, DEFAULT_DATA
from py_voronoid.config import CanvasSettings, Orientation
from py_voronoid.logging_config import configure_logging
from py_voronoid.utils import make_rng


def main():
    configure_logging("INFO", fmt="console")

    canvas = CanvasSettings.from_orientation(Orientation.LANDSCAPE)
    sites = prepare_sites(DEFAULT_DATA)

    engine = LayoutEngine(rng=make_rng("layout_demo"), padding=canvas.padding)

    def report(progress):
        if progress.iteration % 25 == 0:
            print(progress.status_text)

    result = engine.generate(sites, canvas.width, canvas.height, on_progress=report)
    print(result.status_text)

    print(f"\n{'Label':<20} {'Category':<26} {'Share':>6} {'Area':>7}  Tier")
    for meta in result.metadata:
        print(f"{meta.label:<20} {CATEGORIES[meta.category].label:<26} "
              f"{meta.percentage + '%':>6} {meta.area_fraction * 100:6.2f}%  {meta.tier.value}")

    # Drag the largest cell toward the top-left corner, then re-balance
    engine.move_seed(0, canvas.width * 0.3, canvas.height * 0.3)
    print("\nAfter drag:", engine.result.status_text)

    result = engine.reoptimize_after_drag(0)
    print("After re-optimization:", result.status_text)


if __name__ == "__main__":
    main()
