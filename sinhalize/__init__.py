from .core import SinhalizeOptions, TransliterateResult, translate, transliterate
from .resources import ResourceError, SinhalizeResources

__all__ = [
    "ResourceError",
    "SinhalizeOptions",
    "SinhalizeResources",
    "TransliterateResult",
    "translate",
    "transliterate",
]
