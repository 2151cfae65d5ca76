# Windows-compatible server launcher
# Run this instead of: uvicorn a11y_tester.main:app --reload
# Usage: python run.py

import sys
import asyncio

# CRITICAL: Set Windows event loop policy BEFORE any other imports
if sys.platform == 'win32':
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import socket

import uvicorn

from a11y_tester.config import settings


def find_available_port(start_port: int, max_attempts: int = 100) -> int:
    """Return the first port from start_port upward that can be bound."""
    for port in range(start_port, min(start_port + max_attempts, 65536)):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((settings.host, port))
            except OSError:
                print(f"Port {port} is in use, trying next port...")
                continue
            return port
    raise RuntimeError(f"No available port found starting from {start_port}")


if __name__ == "__main__":
    port = find_available_port(settings.port)

    print(f"🚀 Starting {settings.app_name} Server...")
    print(f"🌐 Open: http://localhost:{port}")
    print(f"📝 Docs: http://localhost:{port}/docs")
    print(f"❤️  Health: http://localhost:{port}/health")
    print("-" * 50)

    uvicorn.run(
        "a11y_tester.main:app",
        host=settings.host,
        port=port,
        reload=settings.debug,
        reload_delay=0.5
    )
