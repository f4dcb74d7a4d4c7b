import numpy as np
from PIL import Image

from latex_canvas.models import Node, NodeType


def assert_mathml_valid(mathml: str):
    """Assert that MathML is valid."""
    assert '<math' in mathml
    assert 'xmlns="http://www.w3.org/1998/Math/MathML"' in mathml

    # Check balanced tags
    import re
    open_tags = re.findall(r'<(\w+)[^>]*(?<!/)>', mathml)
    close_tags = re.findall(r'</(\w+)>', mathml)

    for tag in set(open_tags):
        assert open_tags.count(tag) == close_tags.count(tag), f"Unbalanced tag: {tag}"


def compare_images(img1: Image.Image, img2: Image.Image, threshold=0.95) -> bool:
    """Compare two images for similarity."""
    if img1.size != img2.size:
        return False

    # Convert to numpy arrays
    arr1 = np.array(img1)
    arr2 = np.array(img2)

    # Calculate similarity
    diff = np.abs(arr1.astype(float) - arr2.astype(float))
    similarity = 1 - (diff.sum() / (arr1.size * 255))

    return similarity >= threshold


def ink_pixels(image: Image.Image, background: int = 255) -> int:
    """Count pixels that differ from the background."""
    return int((np.array(image.convert('L')) != background).sum())


def line_contents(document: Node):
    """Texts of the top-level children of every line of the document environment."""
    environment = document.children[0]
    return [
        [child.text if child.node_type == NodeType.PLAIN else child.node_type.value
         for child in line.children]
        for paragraph in environment.children
        for line in paragraph.children
    ]
