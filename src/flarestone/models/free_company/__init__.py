# ABOUTME: Free company page models
# ABOUTME: Re-exports the profile page and member list schemas

from .members import FreeCompanyMembers, MemberEntry, RankInfo
from .overview import FreeCompany

__all__ = ["FreeCompany", "FreeCompanyMembers", "MemberEntry", "RankInfo"]
