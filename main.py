#!/usr/bin/env python3
"""
SlopeSense - Main Entry Point

Runs the SlopeSense Flask web application.

Usage:
    python main.py [--host HOST] [--port PORT] [--debug]
"""

import argparse

from config import settings


def main():
    parser = argparse.ArgumentParser(description="SlopeSense ski conditions web app")

    parser.add_argument("--host", default="0.0.0.0", help="Web app host")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Web app port")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = parser.parse_args()

    from webapp.app import create_app
    app = create_app()
    print(f"🚀 Starting SlopeSense...")
    print(f"📍 Server running at: http://{args.host}:{args.port}")
    print(f"🔧 Debug mode: {'ON' if args.debug else 'OFF'}")
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)

if __name__ == "__main__":
    main()
