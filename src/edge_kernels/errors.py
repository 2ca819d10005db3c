"""
Error Hierarchy
===============

Root exception for every error raised by the kernels.

Each kernel defines its own exceptions next to the code that raises them;
they all derive from EdgeKernelError so the HTTP layer can tell kernel
failures apart from programming errors.
"""


class EdgeKernelError(Exception):
    """Base class for all kernel errors."""
    pass
