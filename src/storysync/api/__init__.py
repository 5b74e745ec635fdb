"""HTTP interface of the storysync proxy.

Run with:
    storysync serve
or:
    uvicorn storysync.api:create_app --factory --port 4000
"""

from storysync.api.app import create_app

__all__ = ["create_app"]
