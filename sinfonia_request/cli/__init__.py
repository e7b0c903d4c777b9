"""
CLI Client Module.

Command-line remote for the Sinfonia sound server, built with click
(request.py) and textual (tui.py).

Architecture:
- CLI is a thin presentation layer
- All playback logic lives in the sound server
- CLI calls the server via HTTP (httpx) with a static bearer token
- One command token maps to exactly one request (see commands.py)

Usage:
    python request.py --help
    python request.py play
    python request.py trigger thunder
    python request.py upload --file themes/forest.json
    python tui.py  # Interactive mode
"""
