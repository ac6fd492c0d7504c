"""Main module for blog_analytics MCP server.

This module allows the server to be run as a Python module using:
python -m blog_analytics

It delegates to the server application's main function.
"""

from blog_analytics.server.app import main

if __name__ == "__main__":
    main()
