"""Routes module for the LaTeX rendering API."""
from flask import Blueprint, current_app, jsonify, request

from .models.types import ProcessingError

api_bp = Blueprint('api', __name__, url_prefix='/api')

OUTPUT_FORMATS = ('segments', 'html')


def init_app(app):
    """Register the API blueprint and its error handlers."""
    app.register_blueprint(api_bp)

    @app.errorhandler(ProcessingError)
    def handle_processing_error(error):
        current_app.config['LOGGER'].log_error(error)
        return jsonify(error.to_dict()), 422


def _bad_request(message: str):
    return jsonify({'error': message}), 400


@api_bp.route('/render', methods=['POST'])
def render():
    """Transform LaTeX source into segments or HTML."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get('text'), str):
        return _bad_request("Request body must be JSON with a string 'text' field")

    text = payload['text']
    output_format = payload.get('format', 'segments')
    if output_format not in OUTPUT_FORMATS:
        return _bad_request(f"Unknown format {output_format!r}, expected one of {list(OUTPUT_FORMATS)}")

    max_length = current_app.config['RENDERER_CONFIG'].max_input_length
    if len(text) > max_length:
        return _bad_request(f"Input of {len(text)} characters exceeds the limit of {max_length}")

    processor = current_app.config['LATEX_PROCESSOR']
    if output_format == 'html':
        html = processor.render_html(text, renderer=current_app.config['MATH_RENDERER'])
        return jsonify({'html': str(html)})

    lines = processor.process(text)
    return jsonify({'lines': [line.to_dict() for line in lines]})


@api_bp.route('/macros', methods=['GET'])
def macros():
    """Macro table for a client-side renderer."""
    renderer = current_app.config['MATH_RENDERER']
    output_mode = current_app.config['RENDERER_CONFIG'].latex.output_mode
    return jsonify({'macros': renderer.macros, 'output_mode': output_mode})


@api_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})
