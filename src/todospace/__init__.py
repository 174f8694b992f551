"""
TodoSpace: multi-user to-do list API with bearer-token auth.

The FastAPI application lives in ``todospace.main`` (``app`` or
``create_app()``); the Python client lives in ``todospace.client``.
"""

__version__ = "0.1.0"
