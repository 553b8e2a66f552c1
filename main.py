#!/usr/bin/env python3
"""
PDF Marker MCP Server
Loads a PDF, splits it into single pages, and lets a client drag text markers
onto a page; each drop is burned into that page's PDF at the drop position.
"""

import logging

from pdf_marker.backends.fonts import BUILTIN_FONT, FontResource
from pdf_marker.core import paths as _paths
from pdf_marker.core.style import make_style
from pdf_marker.session import ViewerSession
from pdf_marker.tools import mcp_tools

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("PDFMarker")


def build_session(args) -> ViewerSession:
    fonts = FontResource.load(args.font) if args.font else BUILTIN_FONT
    style = make_style(font_name=fonts.font_name, size=args.font_size)
    return ViewerSession(style=style, fonts=fonts, default_label=args.label)


def main(argv=None):
    args = _paths.parse_arguments(argv)
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    _paths.setup_search_directories(args)
    mcp_tools.configure(build_session(args))

    logger.info("Starting PDF Marker MCP Server...")
    logger.info(f"Accessible directories: {_paths.SEARCH_DIRECTORIES}")
    logger.info(f"Maximum file size: {_paths.MAX_FILE_SIZE // (1024 * 1024)} MB")

    mcp_tools.mcp.run()


if __name__ == "__main__":
    main()
