"""Route handler construction on top of Starlette.

Key components:
- **builder**: The immutable ``ApiBuilder`` and ``create_api_handler``
- **pipeline**: Per-request execution of compiled endpoints
- **validation**: Adapter between schemas and the pipeline
- **signals**: Detection of host-framework control-flow exceptions
- **schemas**: Error response body
- **utils**: orjson-backed JSON responses
"""
