# latex_renderer/utils/__init__.py
