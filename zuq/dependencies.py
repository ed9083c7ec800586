"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends

from zuq.repositories import Repositories
from zuq.repositories.beanie import get_beanie_repositories


def get_repositories() -> Repositories:
    """Repositories for the current request (overridden in tests)."""
    return get_beanie_repositories()


Repos = Annotated[Repositories, Depends(get_repositories)]
