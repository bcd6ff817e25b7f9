"""SVG page to preview source and orthogonalized paths."""

from __future__ import annotations

import copy
import gzip
import io
from dataclasses import dataclass
from typing import Sequence

import svgwrite
import svgwrite.base
import svgwrite.container
from svgwrite.extensions import Inkscape

from pathortho.geom import BoundingBox
from pathortho.path import ClosedPath


@dataclass
class OrthoSvgPage:
    """A page (canvas) described by SVG with a viewbox covering the drawn paths.

    The viewbox uses the path coordinate-system left-to-right and bottom-to-top.
    Contains groups/layers:
        - root       -- (group) just contains the y-flip
            - main   -- editable->locked=False  --  hidden->display="block"
            - debug  -- editable->locked=False  --  hidden->display="none"
    """

    _inkscape: Inkscape  # extension to support layers

    drawing: svgwrite.Drawing
    root_group: svgwrite.container.Group
    main_layer: svgwrite.container.Group
    debug_layer: svgwrite.container.Group
    box: BoundingBox
    stroke_width: float

    def __init__(self, box: BoundingBox, canvas_width_mm: float = 200.0, margin_ratio: float = 0.05):
        """
        Initialize the SVG page so that box fits into the viewbox.

        Args:
            box (BoundingBox): area in path coordinates to show.
            canvas_width_mm (float, optional): width of the canvas in millimeters. Defaults to 200.
            margin_ratio (float, optional): margin around box relative to its larger side. Defaults to 0.05.
        """
        extent = max(box.width, box.height)
        if extent <= 0:
            extent = 1.0
        self.box = box.expanded(extent * margin_ratio)
        self.stroke_width = extent / 500.0

        width = self.box.width
        height = self.box.height
        canvas_height_mm = canvas_width_mm * height / width

        # Setup canvas and viewbox. profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{canvas_width_mm}mm", f"{canvas_height_mm}mm"),
            viewBox=(f"{self.box.xmin} {-self.box.ymax} {width} {height}"),
            profile="full",
        )

        # Define root group with transformation to flip y-axis
        self.root_group = self.drawing.g(id="root", transform="scale(1,-1)")

        # Initialize Inkscape extension for layer support
        self._inkscape = Inkscape(self.drawing)

        # Define layers
        self.main_layer = self._inkscape.layer(label="main", locked=False)
        self.debug_layer = self._inkscape.layer(label="debug", locked=False, display="none")

    @staticmethod
    def svg_path_string(path: ClosedPath) -> str:
        """SVG path data of path, closed by 'Z' if the path is closed."""
        points = path.distinct_points() if path.is_closed else path.points
        if points.shape[0] == 0:
            return ""
        cmds = [f"M {points[0, 0]} {points[0, 1]}"]
        cmds.extend(f"L {x} {y}" for x, y in points[1:])
        if path.is_closed:
            cmds.append("Z")
        return " ".join(cmds)

    def add(self, element: svgwrite.base.BaseElement, add_to_debug_layer: bool = False) -> svgwrite.base.BaseElement:
        """Append element to the debug layer or, by default, to the main layer."""
        layer = self.debug_layer if add_to_debug_layer else self.main_layer
        return layer.add(element)

    def add_path(
        self,
        path: ClosedPath,
        stroke: str = "black",
        stroke_width_factor: float = 1.0,
        add_to_debug_layer: bool = False,
    ) -> svgwrite.base.BaseElement:
        """Draw path as outline without fill."""
        return self.add(
            self.drawing.path(
                d=self.svg_path_string(path),
                stroke=stroke,
                stroke_width=self.stroke_width * stroke_width_factor,
                fill="none",
            ),
            add_to_debug_layer,
        )

    def add_nodes(self, path: ClosedPath, fill: str = "blue", add_to_debug_layer: bool = True) -> None:
        """Mark each distinct node of path with a small circle."""
        for x, y in path.distinct_points():
            self.add(self.drawing.circle(center=(float(x), float(y)), r=self.stroke_width * 2, fill=fill), add_to_debug_layer)

    def assemble_tree(self, include_debug_layer: bool = False) -> svgwrite.Drawing:
        """Copy of the drawing with the layers attached below the y-flipped root group.

        The page itself stays unassembled, so it can be extended and saved again.
        """
        drawing = copy.deepcopy(self.drawing)
        root_group = copy.deepcopy(self.root_group)
        if include_debug_layer:
            root_group.add(copy.deepcopy(self.debug_layer))
        root_group.add(copy.deepcopy(self.main_layer))
        drawing.add(root_group)
        return drawing

    def to_string(self, include_debug_layer: bool = False, pretty: bool = False, indent: int = 2) -> str:
        """SVG document as text."""
        svg_buffer = io.StringIO()
        self.assemble_tree(include_debug_layer).write(svg_buffer, pretty=pretty, indent=indent)
        return svg_buffer.getvalue()

    def save_as(
        self,
        filename: str,
        include_debug_layer: bool = False,
        pretty: bool = False,
        indent: int = 2,
        compressed: bool = False,
    ):
        """Save as SVG file

        Args:
            filename (str): path and filename
            include_debug_layer (bool, optional): True if file should contain debug_layer. Defaults to False.
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
            compressed (bool, optional): Save as gzip compressed svgz-file. Defaults to False.
        """
        output_data = self.to_string(include_debug_layer, pretty, indent).encode("utf-8")
        if compressed:
            output_data = gzip.compress(output_data)
        with open(filename, "wb") as svg_file:
            svg_file.write(output_data)

    @classmethod
    def from_paths(cls, source: ClosedPath, results: Sequence[ClosedPath], canvas_width_mm: float = 200.0) -> OrthoSvgPage:
        """
        Create a page showing source in gray and the results in red on top.

        The nodes of the results are marked on the debug layer.

        Args:
            source (ClosedPath): the input path
            results (Sequence[ClosedPath]): orthogonalized paths
            canvas_width_mm (float, optional): width of the canvas in millimeters. Defaults to 200.

        Returns:
            OrthoSvgPage: the prepared page
        """
        box = source.bounding_box
        for result in results:
            box = box.union(result.bounding_box)
        svg_page = cls(box, canvas_width_mm)
        svg_page.add_path(source, stroke="gray")
        for result in results:
            svg_page.add_path(result, stroke="red", stroke_width_factor=1.5)
            svg_page.add_nodes(result)
        return svg_page
