# svg helpers: quick heuristics + scour compression
# mobility_digitizer/utils/svg.py
from __future__ import annotations
import re

from scour import scour

def count_vector_elements(svg_text: str) -> int:
    """Heuristic: count path/line/poly elements quickly."""
    return len(re.findall(r"<(path|line|polyline|polygon)\b", svg_text, flags=re.I))

def _scour_options(precision: int):
    opts = scour.sanitizeOptions()
    # geometry and ids must survive byte-for-byte between runs of the same input
    opts.strip_ids = False
    opts.shorten_ids = False
    opts.protect_ids_noninkscape = False
    opts.digits = int(precision)
    opts.cdigits = int(precision)
    # structural cleanup we do want
    opts.group_collapse = True
    opts.group_create = False
    opts.style_to_xml = True
    opts.simple_colors = False
    opts.keep_defs = False
    opts.keep_editor_data = False
    opts.embed_rasters = False
    # leave document furniture alone
    opts.strip_comments = False
    opts.strip_xml_prolog = False
    opts.remove_metadata = False
    opts.remove_titles = False
    opts.remove_descriptions = False
    opts.remove_descriptive_elements = False
    opts.enable_viewboxing = False
    opts.renderer_workaround = True
    opts.indent_type = "space"
    opts.indent_depth = 2
    opts.newlines = True
    opts.quiet = True
    return opts

def compress_svg(svg_text: str, precision: int = 10) -> str:
    return scour.scourString(svg_text, _scour_options(precision))
