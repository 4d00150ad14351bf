#!/usr/bin/env python3
"""
GopherPods server

Serves the community-curated catalog of Go podcast episodes: the catalog
page, the RSS feed, the public submission form and the moderation queue.
Configuration comes from the environment (see gopherpods.config).
"""

import sys

from gopherpods.server import initialize_server


def main():
    """Main entry point for the GopherPods server."""
    try:
        components, server = initialize_server()
        config = components.config
        print(
            f"[INFO] Starting http transport on {config.http_host}:{config.http_port}",
            file=sys.stderr,
        )
        server.run(transport="http", host=config.http_host, port=config.http_port)

    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"[ERROR] Server failed to start: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
