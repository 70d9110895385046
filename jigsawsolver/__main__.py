# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""Run the API server: python -m jigsawsolver"""

import uvicorn

from jigsawsolver.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "jigsawsolver.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
