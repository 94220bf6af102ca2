import pytest
from pydantic import ValidationError

from conftest import FakeForge, make_repos
from octarchive.core.enumerator import Enumerator
from octarchive.core.errors import APIError, TransportError
from octarchive.core.models import ForgeOrganization, ForgeRepository, ForgeUser

REPOS_PATH = "/api/v1/users/alice/repos"


def test_get_principal():
    forge = FakeForge(login="alice")
    assert Enumerator(forge).get_principal() == ForgeUser(login="alice")


def test_single_page_of_repositories():
    forge = FakeForge(repos={"alice": make_repos("alice", 2)})
    repos = Enumerator(forge).list_repositories("alice")

    assert [r.full_name for r in repos] == ["alice/repo1", "alice/repo2"]
    assert repos[0].clone_url == "https://forge.example/alice/repo1.git"
    assert len(forge.requests_for(REPOS_PATH)) == 1


def test_requests_carry_page_parameters():
    forge = FakeForge(repos={"alice": make_repos("alice", 150)})
    Enumerator(forge).list_repositories("alice")
    assert forge.requests_for(REPOS_PATH) == [
        "https://forge.example/api/v1/users/alice/repos?per_page=100&page=1",
        "https://forge.example/api/v1/users/alice/repos?per_page=100&page=2",
    ]


@pytest.mark.parametrize(
    "total, fetches",
    [
        (0, 1),
        (1, 1),
        (99, 1),
        (100, 2),
        (150, 2),
        (200, 3),
        (201, 3),
    ],
)
def test_short_page_termination(total, fetches):
    items = make_repos("alice", total)
    forge = FakeForge(repos={"alice": items})
    repos = Enumerator(forge).list_repositories("alice")

    assert [r.full_name for r in repos] == [i["full_name"] for i in items]
    assert len(forge.requests_for(REPOS_PATH)) == fetches


def test_custom_page_size():
    forge = FakeForge(repos={"alice": make_repos("alice", 7)})
    repos = Enumerator(forge, per_page=3).list_repositories("alice")
    assert len(repos) == 7
    assert len(forge.requests_for(REPOS_PATH)) == 3


def test_server_side_page_cap_ends_enumeration_early():
    # A forge that silently serves 50 items per page looks like a short page,
    # so only the first 50 of 150 repositories are seen.
    forge = FakeForge(repos={"alice": make_repos("alice", 150)}, page_cap=50)
    repos = Enumerator(forge).list_repositories("alice")
    assert len(repos) == 50
    assert len(forge.requests_for(REPOS_PATH)) == 1


def test_paginate_returns_typed_records():
    forge = FakeForge(orgs=["acme"])
    orgs = Enumerator(forge).paginate(("user", "orgs"), ForgeOrganization)
    assert orgs == [ForgeOrganization(login="acme")]


def test_scopes_without_orgs_does_not_query_orgs():
    forge = FakeForge(orgs=["acme"])
    assert Enumerator(forge).list_scopes(ForgeUser(login="alice")) == ["alice"]
    assert forge.requests_for("/api/v1/user/orgs") == []


def test_scopes_with_orgs_keep_principal_first_and_api_order():
    orgs = [f"org{i:03d}" for i in range(120)]
    forge = FakeForge(orgs=orgs)
    scopes = Enumerator(forge).list_scopes(ForgeUser(login="alice"), include_orgs=True)
    assert scopes == ["alice"] + orgs
    assert len(forge.requests_for("/api/v1/user/orgs")) == 2


def test_scopes_are_not_deduplicated():
    forge = FakeForge(orgs=["alice"])
    assert Enumerator(forge).list_scopes(ForgeUser(login="alice"), include_orgs=True) == ["alice", "alice"]


def test_enumerate_walks_every_scope_in_order():
    forge = FakeForge(
        orgs=["acme"],
        repos={"alice": make_repos("alice", 2), "acme": make_repos("acme", 3)},
    )
    inventory = Enumerator(forge).enumerate(include_orgs=True)

    assert inventory.principal.login == "alice"
    assert inventory.scopes == ["alice", "acme"]
    assert [r.full_name for r in inventory.repositories] == [
        "alice/repo1",
        "alice/repo2",
        "acme/repo1",
        "acme/repo2",
        "acme/repo3",
    ]


def test_enumerate_150_repositories_takes_two_pages():
    forge = FakeForge(repos={"alice": make_repos("alice", 150)})
    inventory = Enumerator(forge).enumerate()
    assert len(inventory.repositories) == 150
    assert len(forge.requests_for(REPOS_PATH)) == 2


@pytest.mark.parametrize("error", [APIError(500, "Internal Server Error", "u"), TransportError("boom")])
def test_enumeration_errors_propagate(error):
    forge = FakeForge(orgs=["acme"], repos={"alice": make_repos("alice", 1)}, fail_on={"/api/v1/users/acme/repos": error})
    with pytest.raises(type(error)):
        Enumerator(forge).enumerate(include_orgs=True)


def test_per_page_must_be_positive():
    with pytest.raises(ValueError):
        Enumerator(FakeForge(), per_page=0)


def test_repository_records_are_immutable():
    repo = ForgeRepository(full_name="alice/repo1", clone_url="https://forge.example/alice/repo1.git")
    with pytest.raises(ValidationError):
        repo.full_name = "alice/other"
