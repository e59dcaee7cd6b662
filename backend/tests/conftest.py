"""Shared test configuration and pytest markers."""

import pytest

from fakes import CASHIERS, ELECTRICIANS, WELDERS, FakeRemoteLookup
from models.schemas.taxonomy import OccupationSkill
from services.remote_lookup import RemoteAuthError, RemoteLookupError


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls the live O*NET API (needs ONET_API_KEY)"
    )


@pytest.fixture
def remote() -> FakeRemoteLookup:
    """Small taxonomy: welding under a priority occupation, soft skills elsewhere."""
    return FakeRemoteLookup(
        searches={
            "welding": [CASHIERS, WELDERS],
            "blueprint reading": [ELECTRICIANS],
            "communication skills": [CASHIERS],
        },
        skills={
            WELDERS.code: [
                OccupationSkill(id="2.B.3.a", name="Welding", description="Joining metal parts."),
                OccupationSkill(id="2.B.3.b", name="Monitor operations"),
            ],
            ELECTRICIANS.code: [
                OccupationSkill(id="2.A.1.a", name="Reading Comprehension"),
            ],
            CASHIERS.code: [
                OccupationSkill(id="2.A.1.d", name="Speaking"),
                OccupationSkill(id="2.B.1.e", name="Communication"),
            ],
        },
    )


@pytest.fixture
def auth_failing_remote() -> FakeRemoteLookup:
    return FakeRemoteLookup(errors={"welding": RemoteAuthError("401 from O*NET")})


@pytest.fixture
def flaky_remote() -> FakeRemoteLookup:
    """Welding search hits a failing priority occupation before a working one."""
    return FakeRemoteLookup(
        searches={"welding": [CASHIERS, ELECTRICIANS]},
        skills={CASHIERS.code: [OccupationSkill(id="2.B.3.a", name="Welding")]},
        errors={ELECTRICIANS.code: RemoteLookupError("503 from O*NET")},
    )
