"""
Run the dashboard with uvicorn.

Environment variables:

* DASHBOARD_HOST: bind address (default: 0.0.0.0)
* DASHBOARD_PORT: listen port (default: 8000)
"""
import os

import uvicorn


def main():
    host = os.environ.get("DASHBOARD_HOST", "0.0.0.0")
    port = int(os.environ.get("DASHBOARD_PORT", "8000"))
    uvicorn.run("dashboard.api:app", host=host, port=port)


if __name__ == "__main__":
    main()
