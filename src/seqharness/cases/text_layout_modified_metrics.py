"""
Canvas vs. SDF text layout consistency with a font whose metrics were modified.

Both text nodes use the same text, size and width. If the two renderers agree
on layout, the red canvas text and the translucent blue SDF text overlap
exactly and read as a single purple block. Press the advance key to cycle
through the widths and font families.
"""

from __future__ import annotations

from seqharness.cases.base import HarnessCase
from seqharness.core.engine.sequence import MutationSequence
from seqharness.scene.nodes import RenderingEngine

CASE_NAME = "text-layout-consistency-modified-metrics"

FONT_FAMILY = "Ubuntu"
FONT_FAMILY_MODIFIED = "Ubuntu-Modified-Metrics"

TEXT = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. Duis aute irure "
    "dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur. "
    "Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt "
    "mollit anim id est laborum."
)
FONT_SIZE = 100
ROOT_SIZE = 1000


def build(renderer: RenderingEngine) -> HarnessCase:
    root = renderer.root
    root.width = ROOT_SIZE
    root.height = ROOT_SIZE
    root.color = 0xFFFFFFFF

    canvas_text = renderer.create_text_node(
        y=0,
        width=root.width,
        text=TEXT,
        font_size=FONT_SIZE,
        font_family=FONT_FAMILY,
        contain="width",
        color=0xFF0000FF,
        text_renderer_override="canvas",
        parent=root,
    )
    sdf_text = renderer.create_text_node(
        y=0,
        width=root.width,
        text=TEXT,
        font_size=FONT_SIZE,
        font_family=FONT_FAMILY,
        contain="width",
        color=0x0000FF77,
        parent=root,
        z_index=3,
    )
    index_info = renderer.create_text_node(
        x=root.width,
        y=root.height,
        mount=1,
        width=0,
        height=0,
        color=0x000000FF,
        font_family=FONT_FAMILY,
        font_size=20,
        text="1",
        parent=root,
    )

    def set_family(family: str) -> None:
        canvas_text.font_family = family
        sdf_text.font_family = family

    def set_width(width: float) -> None:
        canvas_text.width = width
        sdf_text.width = width

    def narrow_regular() -> None:
        set_family(FONT_FAMILY)
        set_width(500)

    def wide_modified() -> None:
        set_family(FONT_FAMILY_MODIFIED)
        set_width(1000)

    mutations = MutationSequence(
        [
            narrow_regular,
            lambda: set_family(FONT_FAMILY_MODIFIED),
            lambda: set_family(FONT_FAMILY),
            wide_modified,
            lambda: set_family(FONT_FAMILY),
        ]
    )

    return HarnessCase(
        name=CASE_NAME,
        mutations=mutations,
        status_node=index_info,
        entities={"canvas_text": canvas_text, "sdf_text": sdf_text, "index_info": index_info},
        description=__doc__.strip().splitlines()[0],
    )
