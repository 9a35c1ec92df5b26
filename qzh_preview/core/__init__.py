"""GUI-agnostic core: XML loading, the TEI transform and its helpers."""
