import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_description_enhancer, get_onet_client, get_pipeline
from api.router import limiter
from fakes import CASHIERS, WELDERS, FakeRemoteLookup
from main import app
from models.schemas.description import DescriptionSection, StructuredDescription
from models.schemas.skill_cache import CacheRecord
from models.schemas.taxonomy import OccupationMatch, OccupationSkill, TaxonomyEntry
from services.description_enhancer import DescriptionEnhancer
from services.remote_lookup import RemoteLookupError
from services.skill_pipeline import SkillPipeline
from services.taxonomy_cache import TaxonomyCache

client = TestClient(app)


class FakeOnetClient(FakeRemoteLookup):
    def __init__(self, configured=True, **kwargs):
        super().__init__(**kwargs)
        self.configured = configured

    async def find_occupation(self, job_title):
        if job_title == "error":
            raise RemoteLookupError("503 from O*NET")
        if job_title.lower() != "welder":
            return None
        return OccupationMatch(code=WELDERS.code, title=WELDERS.title, confidence="medium", alternates=[CASHIERS])

    async def get_occupation(self, occupation_code):
        if occupation_code == "99-9999.00":
            raise RemoteLookupError("503 from O*NET")
        if occupation_code != WELDERS.code:
            return None
        return {"code": WELDERS.code, "title": WELDERS.title, "tags": {"bright_outlook": False}}


class StubEnhancer(DescriptionEnhancer):
    def __init__(self, result):
        self.result = result

    async def enhance(self, description):
        return self.result


def _override(onet=None, enhancer=None):
    cache = TaxonomyCache({
        "welding": CacheRecord(normalized="welding", onet=TaxonomyEntry(id="2.B.3.a", name="Welding")),
        "forklift": CacheRecord(normalized="forklift", onet=None),
    })
    pipeline = SkillPipeline(cache=cache)
    onet = onet or FakeOnetClient(
        searches={"blueprint reading": [WELDERS]},
        skills={WELDERS.code: [OccupationSkill(id="2.B.4.a", name="Blueprint Reading")]},
    )
    enhancer = enhancer or StubEnhancer(StructuredDescription(sections=[
        DescriptionSection(title="Requirements", type="list", content=["MIG welding"]),
    ]))
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_onet_client] = lambda: onet
    app.dependency_overrides[get_description_enhancer] = lambda: enhancer


@pytest.fixture(autouse=True)
def _dependencies():
    limiter.enabled = False
    _override()
    yield
    app.dependency_overrides.clear()
    limiter.enabled = True


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "skills_cached": 2,
        "onet_configured": True,
        "llm_configured": True,
    }


class TestProcessSkills:
    def test_cache_only(self):
        response = client.post("/skills/process", json={
            "skills": ["Excellent welding", "work with us", "Blueprint Reading", "forklift"],
        })
        assert response.status_code == 200
        assert response.json() == {"skills": ["Welding", "blueprint reading", "forklift"]}

    def test_live(self):
        response = client.post("/skills/process", json={"skills": ["Blueprint Reading"], "live": True})
        assert response.status_code == 200
        assert response.json() == {"skills": ["Blueprint Reading"]}

    def test_live_without_onet_key(self):
        _override(onet=FakeOnetClient(configured=False))
        response = client.post("/skills/process", json={"skills": ["welding"], "live": True})
        assert response.status_code == 503

    def test_empty_list(self):
        response = client.post("/skills/process", json={"skills": []})
        assert response.json() == {"skills": []}


class TestLookup:
    def test_matched(self):
        response = client.get("/skills/lookup", params={"skill": "Excellent Welding"})
        assert response.status_code == 200
        data = response.json()
        assert data["normalized"] == "welding"
        assert data["matched"] is True
        assert data["canonical_name"] == "Welding"
        assert data["onet"]["id"] == "2.B.3.a"

    def test_unmatched_entry(self):
        data = client.get("/skills/lookup", params={"skill": "forklift"}).json()
        assert data["matched"] is False
        assert data["canonical_name"] == "forklift"
        assert data["onet"] is None

    def test_not_cached(self):
        assert client.get("/skills/lookup", params={"skill": "carpentry"}).status_code == 404


class TestOccupationMatch:
    def test_match(self):
        response = client.get("/occupations/match", params={"title": "Welder"})
        assert response.status_code == 200
        data = response.json()
        assert data["code"] == WELDERS.code
        assert data["confidence"] == "medium"
        assert data["alternates"][0]["code"] == CASHIERS.code

    def test_no_match(self):
        assert client.get("/occupations/match", params={"title": "astronaut"}).status_code == 404

    def test_remote_failure(self):
        assert client.get("/occupations/match", params={"title": "error"}).status_code == 502

    def test_unconfigured(self):
        _override(onet=FakeOnetClient(configured=False))
        assert client.get("/occupations/match", params={"title": "Welder"}).status_code == 503



class TestOccupationDetails:
    def test_details(self):
        response = client.get(f"/occupations/{WELDERS.code}")
        assert response.status_code == 200
        assert response.json()["title"] == WELDERS.title

    def test_unknown_code(self):
        assert client.get(f"/occupations/{CASHIERS.code}").status_code == 404

    def test_malformed_code(self):
        assert client.get("/occupations/welder").status_code == 422

    def test_remote_failure(self):
        assert client.get("/occupations/99-9999.00").status_code == 502

    def test_unconfigured(self):
        _override(onet=FakeOnetClient(configured=False))
        assert client.get(f"/occupations/{WELDERS.code}").status_code == 503

class TestEnhanceDescription:
    def test_enhance(self):
        response = client.post("/enhance-description", json={"description": "Need a welder. MIG welding."})
        assert response.status_code == 200
        assert response.json()["sections"][0] == {
            "title": "Requirements", "type": "list", "content": ["MIG welding"],
        }

    def test_empty_description(self):
        response = client.post("/enhance-description", json={"description": "   "})
        assert response.status_code == 400

    def test_unavailable(self):
        _override(enhancer=StubEnhancer(None))
        response = client.post("/enhance-description", json={"description": "Need a welder."})
        assert response.status_code == 503
