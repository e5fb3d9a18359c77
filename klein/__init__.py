"""Building blocks for a terminal IDE: LSP client pieces, file tree, layout, menus and ANSI stripping."""

__version__ = "0.5.0"