# latex_renderer/__init__.py
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from .config import RendererConfig, config
from .latex.latex_processor import LaTeXProcessor
from .utils.logger import RendererLogger


def create_app(config_name: Optional[str] = None, renderer_config: Optional[RendererConfig] = None) -> Flask:
    """
    Application factory for the rendering API.

    Args:
        config_name: Key into the Flask config classes; defaults to FLASK_ENV
        renderer_config: Rendering settings; read from the environment when omitted
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    renderer_config = renderer_config or RendererConfig.from_environment()
    logger = RendererLogger(
        name=__name__,
        log_file=renderer_config.log_file,
        log_level=renderer_config.log_level
    )

    try:
        app = Flask(__name__)
        app.config.from_object(config.get(config_name, config['default']))

        renderer = renderer_config.latex.create_renderer()
        app.config.update({
            'RENDERER_CONFIG': renderer_config,
            'MATH_RENDERER': renderer,
            'LATEX_PROCESSOR': LaTeXProcessor(logger=logger),
            'LOGGER': logger
        })

        # Configure CORS
        CORS(app, resources={
            r"/api/*": {
                "origins": app.config.get('CORS_ORIGINS', '*'),
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type"]
            }
        })

        # Register blueprint
        from .routes import init_app as init_routes
        init_routes(app)
        logger.info(f"Application created with '{config_name}' config, output mode '{renderer_config.latex.output_mode}'")

        return app

    except Exception as e:
        logger.error(f"Application initialization failed: {str(e)}")
        raise
