from tlparse.serve.server import (
    CONTENT_TYPES, ServerState, StaticFileServer, decode_url_path,
    guess_content_type, resolve_request_path, sandboxed_path
)

__all__ = [
    "CONTENT_TYPES", "ServerState", "StaticFileServer", "decode_url_path",
    "guess_content_type", "resolve_request_path", "sandboxed_path",
]
