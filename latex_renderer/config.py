# latex_renderer/config.py

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

from .latex.katex_renderer import KaTeXRenderer
from .latex.mathml_renderer import MathMLRenderer
from .models.types import MathRenderer


basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

TRUTHY = ("true", "1", "yes")
OUTPUT_MODES = ("html", "mathml")


def default_macros() -> Dict[str, str]:
    return {
        # Relations
        "\\eqcirc": "\\stackrel{\\circ}{=}",
        "\\triangleq": "\\triangle=",
        "\\corresponds": "\\leftrightarrow",
        "\\approxeq": "\\approx",
        # Logic
        "\\iff": "\\Leftrightarrow",
        "\\implies": "\\Rightarrow",
        # Number sets
        "\\N": "\\mathbb{N}",
        "\\Z": "\\mathbb{Z}",
        "\\Q": "\\mathbb{Q}",
        "\\R": "\\mathbb{R}",
        "\\C": "\\mathbb{C}",
    }


@dataclass
class LaTeXConfig:
    """LaTeX rendering configuration."""
    macros: Dict[str, str] = field(default_factory=default_macros)
    throw_on_error: bool = False
    output_mode: str = "html"  # html (client-side KaTeX) or mathml

    def __post_init__(self):
        if self.output_mode not in OUTPUT_MODES:
            raise ValueError(f"Unknown output mode {self.output_mode!r}, expected one of {OUTPUT_MODES}")

    def create_renderer(self) -> MathRenderer:
        """Build the rendering collaborator for the configured output mode."""
        if self.output_mode == "mathml":
            return MathMLRenderer(macros=self.macros, throw_on_error=self.throw_on_error)
        return KaTeXRenderer(macros=self.macros, throw_on_error=self.throw_on_error)


@dataclass
class RendererConfig:
    """Top-level configuration for the rendering service."""
    latex: LaTeXConfig = field(default_factory=LaTeXConfig)
    log_level: int = logging.INFO
    log_file: Optional[Path] = None
    max_input_length: int = 100_000

    @classmethod
    def from_environment(cls) -> "RendererConfig":
        """Create a RendererConfig from environment variables (and `.env`)."""
        load_dotenv(os.path.join(basedir, ".env"))

        macros = default_macros()
        macros.update(json.loads(os.getenv("LATEX_RENDERER_MACROS", "{}")))

        latex = LaTeXConfig(
            macros=macros,
            throw_on_error=os.getenv("LATEX_RENDERER_THROW_ON_ERROR", "False").lower() in TRUTHY,
            output_mode=os.getenv("LATEX_RENDERER_OUTPUT_MODE", "html")
        )

        level_name = os.getenv("LATEX_RENDERER_LOG_LEVEL", "INFO").upper()
        log_file = os.getenv("LATEX_RENDERER_LOG_FILE")

        return cls(
            latex=latex,
            log_level=getattr(logging, level_name, logging.INFO),
            log_file=Path(log_file) if log_file else None,
            max_input_length=int(os.getenv("LATEX_RENDERER_MAX_INPUT", "100000"))
        )


class Config:
    # Basic configuration
    SECRET_KEY = os.environ.get("SECRET_KEY") or "you-will-never-guess"

    # CORS settings
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False
    CORS_ORIGINS = "*"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '').split(',')


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = True
    TESTING = True
    CORS_ORIGINS = ['http://localhost:5173']


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
