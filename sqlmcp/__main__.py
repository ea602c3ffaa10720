"""Module entrypoint to run `python -m sqlmcp`."""
from sqlmcp.server.stdio import main

if __name__ == "__main__":
    main()
