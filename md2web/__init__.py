"""Markdown to templated HTML/PDF conversion with watch-mode sync."""

from .converter import Converter
from .errors import (
    ConversionError,
    Md2WebError,
    UnsupportedDirectionError,
    ValidationError,
)
from .front_matter import split_front_matter
from .models import Template
from .renderer import DocumentRenderer, generate_toc
from .templates import (
    DEFAULT_TEMPLATE,
    TemplateCache,
    TemplateExtractor,
    TemplateResolver,
)
from .watcher import FileWatcher

__all__ = [
    "Converter",
    "ConversionError",
    "DEFAULT_TEMPLATE",
    "DocumentRenderer",
    "FileWatcher",
    "Md2WebError",
    "Template",
    "TemplateCache",
    "TemplateExtractor",
    "TemplateResolver",
    "UnsupportedDirectionError",
    "ValidationError",
    "generate_toc",
    "split_front_matter",
]
