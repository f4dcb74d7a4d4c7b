#!/usr/bin/env python3
"""Simple example of using LaTeX Canvas"""

from latex_canvas import LaTeXCanvasProcessor, ProcessConfig, format_tree

# Create processor
processor = LaTeXCanvasProcessor(ProcessConfig(convert_to_mathml=True))

# Your LaTeX with a cases environment
latex = r"|x| = \begin{cases} x \\ -x \end{cases}"

# Process the text
print("Processing LaTeX...")
result = processor.process_text(latex)

if not result.is_successful:
    print(f"Failed: {result.errors}")
    raise SystemExit(1)

# Show results
print("\nDocument tree:")
print(format_tree(result.document))

print("\nMathML:")
print(result.mathml)

# Save to file
processor.export_results(result, "absolute_value.png", "png")
processor.export_results(result, "absolute_value.json", "json")
print("\nResults saved to absolute_value.png and absolute_value.json")
