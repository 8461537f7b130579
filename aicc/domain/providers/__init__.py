from .catalog import BUILTIN_PROVIDERS, DEFAULT_CATALOG, GROQ_MODELS, ProviderCatalog
from .wire import build_body, build_headers, extract_content, strip_code_fences

__all__ = [
    "BUILTIN_PROVIDERS",
    "DEFAULT_CATALOG",
    "GROQ_MODELS",
    "ProviderCatalog",
    "build_body",
    "build_headers",
    "extract_content",
    "strip_code_fences",
]
