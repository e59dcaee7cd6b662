import json
import logging

import pytest

from fakes import WELDERS, FakeRemoteLookup
from models.schemas.description import DescriptionSection, StructuredDescription
from models.schemas.taxonomy import OccupationSkill
from scripts import build_skills_cache, clean_job_skills, enhance_descriptions
from services.description_enhancer import DescriptionEnhancer
from services.kv_cache import FileCache
from services.rate_limiter import RateLimiter
from services.remote_lookup import RemoteAuthError
from services.taxonomy_cache import TaxonomyCache

JOBS = [
    {"id": 1, "title": "Welder", "company": "Acme", "skills": ["Excellent welding", "work with us"],
     "description": "Need a welder with MIG experience."},
    {"id": 2, "title": "Yard Hand", "company": "Acme", "skills": ["Forklift", "welding"]},
]


class FakeBuildClient(FakeRemoteLookup):
    def __init__(self, configured=True, **kwargs):
        super().__init__(**kwargs)
        self.configured = configured
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True


@pytest.fixture
def jobs_file(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps(JOBS), encoding="utf-8")
    return path


@pytest.fixture
def build_client():
    return FakeBuildClient(
        searches={"welding": [WELDERS]},
        skills={WELDERS.code: [OccupationSkill(id="2.B.3.a", name="Welding")]},
    )


class TestBuildSkillsCache:
    @pytest.mark.asyncio
    async def test_build_writes_cache(self, jobs_file, tmp_path, build_client):
        output = tmp_path / "cache.json"
        code = await build_skills_cache.build(str(jobs_file), str(output), client=build_client)

        assert code == 0
        assert build_client.closed is True
        cache = TaxonomyCache.load(output)
        assert cache.canonical_name("welding") == "Welding"
        assert cache.get("forklift").onet is None
        assert build_client.search_calls == ["welding", "forklift"]

    @pytest.mark.asyncio
    async def test_incremental_only_looks_up_new_skills(self, jobs_file, tmp_path, build_client):
        output = tmp_path / "cache.json"
        await build_skills_cache.build(str(jobs_file), str(output), limit=1, client=build_client)
        build_client.search_calls.clear()

        await build_skills_cache.build(str(jobs_file), str(output), incremental=True, client=build_client)
        assert build_client.search_calls == ["forklift"]
        assert len(TaxonomyCache.load(output)) == 2

    @pytest.mark.asyncio
    async def test_reports_response_cache(self, jobs_file, tmp_path, build_client, caplog):
        build_client.cache = FileCache(tmp_path / "onet")
        build_client.cache.set("/online/search?keyword=welding", {"occupation": []})
        caplog.set_level(logging.INFO, logger="scripts.build_skills_cache")

        await build_skills_cache.build(str(jobs_file), str(tmp_path / "cache.json"), client=build_client)

        assert "O*NET response cache: 1 entries" in caplog.text

    @pytest.mark.asyncio
    async def test_unconfigured_client(self, jobs_file, tmp_path):
        code = await build_skills_cache.build(str(jobs_file), str(tmp_path / "c.json"),
                                              client=FakeBuildClient(configured=False))
        assert code == 1

    @pytest.mark.asyncio
    async def test_auth_error_propagates(self, jobs_file, tmp_path):
        client = FakeBuildClient(errors={"welding": RemoteAuthError("401")})
        with pytest.raises(RemoteAuthError):
            await build_skills_cache.build(str(jobs_file), str(tmp_path / "c.json"), client=client)
        assert not (tmp_path / "c.json").exists()

    def test_corrupt_cache_exits_non_zero(self, jobs_file, tmp_path):
        output = tmp_path / "cache.json"
        output.write_text("{broken")
        assert build_skills_cache.main(["--jobs", str(jobs_file), "--output", str(output), "--incremental"]) == 1

    def test_missing_jobs_exits_non_zero(self, tmp_path):
        assert build_skills_cache.main(["--jobs", str(tmp_path / "missing.json")]) == 1


class TestCleanJobSkills:
    @pytest.mark.asyncio
    async def test_clean_rewrites_jobs_with_backup(self, jobs_file, tmp_path, build_client):
        cache_path = tmp_path / "cache.json"
        await build_skills_cache.build(str(jobs_file), str(cache_path), client=build_client)

        assert clean_job_skills.main(["--jobs", str(jobs_file), "--cache", str(cache_path)]) == 0

        jobs = json.loads(jobs_file.read_text())
        assert [job["skills"] for job in jobs] == [["Welding"], ["forklift", "Welding"]]
        assert jobs[0]["description"] == JOBS[0]["description"]
        assert json.loads((tmp_path / "jobs.backup.json").read_text()) == JOBS

    def test_dry_run_leaves_file(self, jobs_file, tmp_path):
        report = clean_job_skills.clean(str(jobs_file), str(tmp_path / "none.json"), dry_run=True)
        assert report.skills_before == 4
        assert report.skills_after == 3
        assert json.loads(jobs_file.read_text()) == JOBS
        assert not (tmp_path / "jobs.backup.json").exists()

    def test_corrupt_cache_exits_non_zero(self, jobs_file, tmp_path):
        cache_path = tmp_path / "cache.json"
        cache_path.write_text("[]")
        assert clean_job_skills.main(["--jobs", str(jobs_file), "--cache", str(cache_path)]) == 1
        assert json.loads(jobs_file.read_text()) == JOBS


class CountingEnhancer(DescriptionEnhancer):
    def __init__(self):
        self.seen: list[str] = []

    async def enhance(self, description):
        self.seen.append(description)
        return StructuredDescription(sections=[
            DescriptionSection(title="Role Overview", content=description),
        ])


class TestEnhanceDescriptions:
    @pytest.mark.asyncio
    async def test_adds_structured_description(self, jobs_file):
        enhancer = CountingEnhancer()
        counts = await enhance_descriptions.enhance_jobs(str(jobs_file), enhancer, rate_limiter=RateLimiter(0))

        assert counts == {"processed": 1, "skipped": 1, "failed": 0}
        jobs = json.loads(jobs_file.read_text())
        assert jobs[0]["structuredDescription"]["sections"][0]["title"] == "Role Overview"
        assert "structuredDescription" not in jobs[1]

    @pytest.mark.asyncio
    async def test_skip_processed(self, jobs_file):
        await enhance_descriptions.enhance_jobs(str(jobs_file), CountingEnhancer(), rate_limiter=RateLimiter(0))
        enhancer = CountingEnhancer()
        counts = await enhance_descriptions.enhance_jobs(str(jobs_file), enhancer, skip_processed=True,
                                                         rate_limiter=RateLimiter(0))
        assert enhancer.seen == []
        assert counts["skipped"] == 2

    @pytest.mark.asyncio
    async def test_dry_run_and_failures(self, jobs_file):
        class FailingEnhancer(DescriptionEnhancer):
            async def enhance(self, description):
                return None

        counts = await enhance_descriptions.enhance_jobs(str(jobs_file), FailingEnhancer(), dry_run=True,
                                                         rate_limiter=RateLimiter(0))
        assert counts["failed"] == 1
        assert json.loads(jobs_file.read_text()) == JOBS
