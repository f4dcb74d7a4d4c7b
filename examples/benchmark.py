#!/usr/bin/env python3
"""Time parsing and rendering of a short equation"""

import time

from latex_canvas import LaTeXParser, MathRenderer, RenderConfig

LATEX = "x^2 + y^2 = 1"
ITERATIONS = 100


def benchmark(label, func):
    start = time.perf_counter()
    for _ in range(ITERATIONS):
        func()
    elapsed = time.perf_counter() - start
    print(f"{label}: {elapsed * 1000 / ITERATIONS:.3f} ms per run ({ITERATIONS} runs)")


def main():
    parser = LaTeXParser()
    renderer = MathRenderer(RenderConfig(font_size=48))
    document = parser.parse(LATEX)

    benchmark("parse", lambda: parser.parse(LATEX))
    benchmark("render", lambda: renderer.render_tree(document))
    benchmark("parse + render", lambda: renderer.render_latex(LATEX))


if __name__ == "__main__":
    main()
