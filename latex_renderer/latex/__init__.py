# latex_renderer/latex/__init__.py
from .environment_extractor import EnvironmentExtractor
from .environment_registry import EnvironmentRegistry
from .katex_renderer import KaTeXRenderer
from .latex_processor import LaTeXProcessor
from .latex_validator import LaTeXValidator
from .mathml_renderer import MathMLRenderer
from .placeholder_store import PlaceholderStore
from .segment_splitter import split_segments
from .tabular_transformer import TabularTransformer

__all__ = [
    'EnvironmentExtractor',
    'EnvironmentRegistry',
    'KaTeXRenderer',
    'LaTeXProcessor',
    'LaTeXValidator',
    'MathMLRenderer',
    'PlaceholderStore',
    'split_segments',
    'TabularTransformer'
]
