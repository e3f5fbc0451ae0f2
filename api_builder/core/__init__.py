"""Core infrastructure shared by the API layer.

- **config**: Settings with environment variable support
- **context**: Correlation ID storage for the current request
- **exceptions**: Typed errors that map directly to responses
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup with console and JSON formatters
- **types**: Type aliases for dynamic data structures
"""
