__all__ = ["TextRun", "ImageRef", "ContentItemFactory"]

from .text_run import TextRun
from .image_ref import ImageRef
from .factory import ContentItemFactory
