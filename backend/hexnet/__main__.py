"""Run the HexNet server: python -m hexnet"""

import uvicorn

from hexnet.config import settings


def main() -> None:
    uvicorn.run(
        "hexnet.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
