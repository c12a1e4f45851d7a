# latex_renderer/models/__init__.py
