# canvasflow/generators/__init__.py
