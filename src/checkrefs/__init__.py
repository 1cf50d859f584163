"""Reference checker for activity, task, media and article manifests.

Validates that every file referenced from the content manifests exists,
reports files nobody references, and renders a markdown change report
between two git revisions.
"""

__version__ = "1.0.0"

__all__ = []
