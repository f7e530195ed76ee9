# ABOUTME: Builders for the upstream page URLs every command and multi-page scan requests
# ABOUTME: All URLs hang off the configured base URL unless one is passed explicitly

from flarestone.config import get_config


def _base(base_url: str | None) -> str:
    return (base_url or get_config().base_url).rstrip("/")


def character_url(character_id: str, base_url: str | None = None) -> str:
    return f"{_base(base_url)}/lodestone/character/{character_id}/"


def character_search_url(search_params: str, base_url: str | None = None) -> str:
    return f"{_base(base_url)}/lodestone/character/?{search_params}"


def free_company_url(fc_id: str, base_url: str | None = None) -> str:
    return f"{_base(base_url)}/lodestone/freecompany/{fc_id}/"


def free_company_members_url(fc_id: str, page: int = 1, base_url: str | None = None) -> str:
    """Member list URL; page 1 is requested without a page parameter."""
    url = f"{_base(base_url)}/lodestone/freecompany/{fc_id}/member"
    return url if page == 1 else f"{url}?page={page}"


def worldstatus_url(base_url: str | None = None) -> str:
    return f"{_base(base_url)}/lodestone/worldstatus/"
