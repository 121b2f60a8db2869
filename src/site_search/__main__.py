"""Entry point for the site-search MCP server."""

from site_search.server import create_server


def main() -> None:
    """Run the site-search MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
