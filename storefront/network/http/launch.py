from storefront import setup

setup.run()

import uvicorn  # noqa: E402

from storefront import settings  # noqa: E402
from storefront.network.http.server import server as http_server  # noqa: E402

# Booted with: uvicorn storefront.network.http.launch:server
server = http_server


def main() -> None:
    uvicorn.run(server, host=settings.BIND_HOST, port=settings.BIND_PORT, log_config=None)
