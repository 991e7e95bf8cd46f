"""Storage core of a small relational database: values, pages, disk files, replacers and a buffer pool."""

__version__ = "0.1.0"
__all__ = [
    "bitmap",
    "buffer_pool",
    "condition",
    "disk",
    "meta",
    "page",
    "replacer",
    "rid",
    "types",
    "value",
]