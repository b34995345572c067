"""Module entrypoint.

Allows:
    python -m mcp_audit_parser
"""

from __future__ import annotations

from mcp_audit_parser.server.audit_server import main

if __name__ == "__main__":
    main()
