"""Walk paged forge collections and collect the principal's repositories."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .constants import PER_PAGE
from .forge_client import ForgeClient
from .models import ForgeOrganization, ForgeRepository, ForgeUser, Inventory

log = logging.getLogger(__name__)


class Enumerator:
    """Sequential enumeration on top of a :class:`ForgeClient`.

    A collection is exhausted as soon as a page holds fewer than ``per_page``
    items. There is no total-count header or cursor involved, so a collection
    whose size is an exact multiple of ``per_page`` costs one extra, empty,
    request. A server that caps pages below ``per_page`` ends enumeration
    after its first page.
    """

    def __init__(self, client: ForgeClient, *, per_page: int = PER_PAGE) -> None:
        if per_page < 1:
            raise ValueError("per_page must be positive")
        self.client = client
        self.per_page = per_page

    def paginate(self, parts: Sequence[str], schema: Any) -> list[Any]:
        items: list[Any] = []
        page = 1
        while True:
            url = self.client.url(*parts, per_page=self.per_page, page=page)
            log.debug("Fetching page page=%d url=%s", page, url)
            batch = self.client.get_model(url, list[schema])
            items.extend(batch)
            if len(batch) < self.per_page:
                return items
            page += 1

    def get_principal(self) -> ForgeUser:
        log.info("Getting user url=%s", self.client.url("user"))
        user = self.client.get_model(self.client.url("user"), ForgeUser)
        log.debug("Got user user=%s", user.login)
        return user

    def list_scopes(self, principal: ForgeUser, include_orgs: bool = False) -> list[str]:
        slugs = [principal.login]
        if include_orgs:
            log.info("Getting organizations for user user=%s", principal.login)
            orgs = self.paginate(("user", "orgs"), ForgeOrganization)
            slugs.extend(org.login for org in orgs)
        log.debug("Got organizations for user organizations=%s", slugs)
        return slugs

    def list_repositories(self, slug: str) -> list[ForgeRepository]:
        repos = self.paginate(("users", slug, "repos"), ForgeRepository)
        for repo in repos:
            log.debug("Got repo slug=%s full_name=%s clone_url=%s", slug, repo.full_name, repo.clone_url)
        return repos

    def enumerate(self, include_orgs: bool = False) -> Inventory:
        principal = self.get_principal()
        scopes = self.list_scopes(principal, include_orgs)
        repositories: list[ForgeRepository] = []
        for slug in scopes:
            repositories.extend(self.list_repositories(slug))
        return Inventory(principal=principal, scopes=scopes, repositories=repositories)
