"""
Run the API server: python -m arbscan
"""

import uvicorn

from arbscan.core.config import settings


def main():
    uvicorn.run("arbscan.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
