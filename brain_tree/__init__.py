"""
brain_tree
==========

Interactive hierarchical note taking for macOS: a tree of short text nodes
kept as one JSON document per tree, exportable to a Word document.
"""

__version__ = "0.3.0"

__all__ = [
	"config",
	"errors",
	"exporter",
	"ids",
	"model",
	"renderer",
	"session",
	"store",
	"tree",
]
