"""Unit-test fixtures built on the in-memory fakes."""

import pytest

from fakes import (
    FakeBidRepository,
    FakeListingRepository,
    FakeStore,
    FakeTransactionRepository,
    make_listing,
)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def listing_repo() -> FakeListingRepository:
    return FakeListingRepository(make_listing())


@pytest.fixture
def bid_repo() -> FakeBidRepository:
    return FakeBidRepository()


@pytest.fixture
def txn_repo() -> FakeTransactionRepository:
    return FakeTransactionRepository()
