"""bmadflow — agent personas, templates, and workflow validation rules."""

__version__ = "1.0.0"
