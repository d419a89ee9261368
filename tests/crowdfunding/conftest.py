import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def crowdfunding_bed():
    from crowdfunding.domain import crowdfunding

    bed = DomainFixture(crowdfunding)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(crowdfunding_bed):
    with crowdfunding_bed.domain_context():
        yield
