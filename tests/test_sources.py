"""
Unit tests for the source connectors.

Every connector runs against `httpx.MockTransport`, so these tests check the
outgoing requests (URL, query string, headers), response parsing, caching and
the error-to-empty-response conversion.
"""

import httpx
import pytest

from jobboard.config import Settings
from jobboard.models import AdzunaParams, JobicyParams, JoinriseParams, USAJobsParams
from jobboard.sources import AdzunaSource, JobicySource, JoinriseSource, USAJobsSource
from jobboard.sources.jobicy import geo_for_location

from payloads import (
    ADZUNA_HOST,
    JOBICY_HOST,
    JOINRISE_HOST,
    USAJOBS_HOST,
    adzuna_job,
    adzuna_payload,
    jobicy_job,
    jobicy_payload,
    joinrise_job,
    joinrise_payload,
    usajobs_item,
    usajobs_payload,
)


class TestUSAJobsSource:
    """Tests for the USAJOBS connector."""

    @pytest.mark.asyncio
    async def test_request_headers_and_defaults(self, settings, upstream):
        upstream.routes[USAJOBS_HOST] = usajobs_payload(usajobs_item())
        source = USAJobsSource(settings, transport=upstream.transport)

        await source.search(USAJobsParams(keyword="security", remote_indicator=True))

        request = upstream.calls[0]
        assert request.url.path == "/api/search"
        assert request.headers["Authorization-Key"] == "test-key"
        assert request.headers["User-Agent"] == "jobs@example.com"
        assert request.headers["Host"] == "data.usajobs.gov"
        params = request.url.params
        assert params["Keyword"] == "security"
        assert params["RemoteIndicator"] == "true"
        assert params["ResultsPerPage"] == "25"
        assert params["SortField"] == "DatePosted"
        assert params["SortDirection"] == "Desc"
        assert params["DatePosted"] == "30"
        assert "LocationName" not in params

    @pytest.mark.asyncio
    async def test_explicit_params_override_defaults(self, settings, upstream):
        upstream.routes[USAJOBS_HOST] = usajobs_payload()
        source = USAJobsSource(settings, transport=upstream.transport)

        await source.search(USAJobsParams(results_per_page=5, date_posted=7))

        params = upstream.calls[0].url.params
        assert params["ResultsPerPage"] == "5"
        assert params["DatePosted"] == "7"

    @pytest.mark.asyncio
    async def test_parses_nested_response(self, settings, upstream):
        upstream.routes[USAJOBS_HOST] = usajobs_payload(
            usajobs_item("1", remote="true", telework=True),
            usajobs_item("2", remote=False, telework="false"),
            count=40,
        )
        source = USAJobsSource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.ok
        assert result.total_count == 40
        assert result.has_more is True
        first, second = result.jobs
        assert first.id == "1"
        assert first.remote is True
        assert first.telework_eligible is True
        assert first.grade == "12-13"
        assert first.openings == "2"
        assert first.salary_min == "80000.0"
        assert second.remote is False
        assert second.telework_eligible is False

    @pytest.mark.asyncio
    async def test_skips_items_without_id(self, settings, upstream):
        broken = usajobs_item("9")
        broken["MatchedObjectId"] = None
        broken["MatchedObjectDescriptor"]["PositionID"] = None
        upstream.routes[USAJOBS_HOST] = usajobs_payload(usajobs_item("1"), broken)
        source = USAJobsSource(settings, transport=upstream.transport)

        result = await source.search()

        assert [j.id for j in result.jobs] == ["1"]

    @pytest.mark.asyncio
    async def test_disabled_without_api_key(self, upstream):
        source = USAJobsSource(Settings(_env_file=None), transport=upstream.transport)

        result = await source.search()

        assert source.enabled is False
        assert result.jobs == []
        assert result.error
        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_presets_supply_parameters(self, settings, upstream):
        upstream.routes[USAJOBS_HOST] = usajobs_payload()
        source = USAJobsSource(settings, transport=upstream.transport)

        await source.get_high_paying_jobs(100000)
        await source.get_entry_level_jobs()

        high_paying, entry_level = (r.url.params for r in upstream.calls)
        assert high_paying["RemunerationMinimumAmount"] == "100000"
        assert high_paying["WhoMayApply"] == "public"
        assert entry_level["PayGradeLow"] == "05"
        assert entry_level["PayGradeHigh"] == "09"


class TestCaching:
    """Tests for the per-source response cache."""

    @pytest.mark.asyncio
    async def test_cache_hit_avoids_network_until_ttl(self, settings, upstream, clock):
        upstream.routes[JOBICY_HOST] = jobicy_payload(jobicy_job())
        source = JobicySource(settings, transport=upstream.transport, clock=clock)
        params = JobicyParams(tag="python", geo="usa")

        first = await source.search(params)
        second = await source.search(params)
        assert len(upstream.calls) == 1
        assert second == first

        clock.advance(settings.jobicy_cache_ttl_s)
        await source.search(params)
        assert len(upstream.calls) == 2

    @pytest.mark.asyncio
    async def test_equivalent_params_share_an_entry(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = jobicy_payload()
        source = JobicySource(settings, transport=upstream.transport)

        await source.search(JobicyParams(tag="python", geo="usa"))
        await source.search(JobicyParams(geo="usa", tag="python"))
        await source.search(JobicyParams(geo="usa", tag="python", count=50))

        assert len(upstream.calls) == 1

    @pytest.mark.asyncio
    async def test_ttls_are_per_source(self, settings, upstream, clock):
        upstream.routes[JOBICY_HOST] = jobicy_payload()
        upstream.routes[JOINRISE_HOST] = joinrise_payload()
        jobicy = JobicySource(settings, transport=upstream.transport, clock=clock)
        joinrise = JoinriseSource(settings, transport=upstream.transport, clock=clock)

        await jobicy.search()
        await joinrise.search()
        clock.advance(45 * 60)
        await jobicy.search()
        await joinrise.search()

        assert len(upstream.calls_to(JOBICY_HOST)) == 1
        assert len(upstream.calls_to(JOINRISE_HOST)) == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, settings, upstream):
        upstream.routes[JOINRISE_HOST] = 503
        source = JoinriseSource(settings, transport=upstream.transport)

        await source.search()
        upstream.routes[JOINRISE_HOST] = joinrise_payload(joinrise_job())
        result = await source.search()

        assert result.ok
        assert len(result.jobs) == 1
        assert len(upstream.calls) == 2

    @pytest.mark.asyncio
    async def test_clear_cache(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = jobicy_payload()
        source = JobicySource(settings, transport=upstream.transport)

        await source.search()
        source.clear_cache()
        await source.search()

        assert len(upstream.calls) == 2


class TestErrorHandling:
    """Upstream failures become empty responses, never exceptions."""

    @pytest.mark.asyncio
    async def test_http_error_status(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = 500
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.jobs == []
        assert result.count == 0
        assert "500" in result.error

    @pytest.mark.asyncio
    async def test_transport_error(self, settings, upstream):
        upstream.routes[JOINRISE_HOST] = httpx.ConnectError("connection refused")
        source = JoinriseSource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.jobs == []
        assert result.total == 0
        assert result.error == "joinrise request failed: ConnectError"

    @pytest.mark.asyncio
    async def test_undecodable_body(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = lambda request: httpx.Response(200, text="<html>oops</html>")
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.jobs == []
        assert result.error

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self, settings, upstream):
        responses = [httpx.Response(429), httpx.Response(200, json=jobicy_payload(jobicy_job()))]
        upstream.routes[JOBICY_HOST] = lambda request: responses.pop(0)
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.ok
        assert len(result.jobs) == 1
        assert len(upstream.calls) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_gives_up_after_retries(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = 429
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        assert "429" in result.error
        assert len(upstream.calls) == settings.max_retries + 1


class TestJobicySource:
    """Tests for the Jobicy connector."""

    @pytest.mark.asyncio
    async def test_request_and_parse(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = jobicy_payload(jobicy_job(), jobicy_job(102, jobGeo=["Canada", "USA"]))
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        request = upstream.calls[0]
        assert request.url.path == "/api/v2/remote-jobs"
        assert request.url.params["count"] == "50"
        assert request.headers["User-Agent"] == "RemoteWorkBlog/1.0"
        assert "Authorization-Key" not in request.headers
        assert result.count == 2
        assert result.jobs[0].id == "101"
        assert result.jobs[0].job_geo == ["USA"]
        assert result.jobs[1].job_geo == ["Canada", "USA"]

    @pytest.mark.asyncio
    async def test_missing_fields_default(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = {}
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        assert result.ok
        assert result.jobs == []
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_non_numeric_salary_keeps_the_job(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = jobicy_payload(
            jobicy_job(1, salaryMin="Competitive", salaryMax=""),
            jobicy_job(2, salaryMin="85,000", salaryMax=None),
        )
        source = JobicySource(settings, transport=upstream.transport)

        result = await source.search()

        first, second = result.jobs
        assert first.id == "1"
        assert first.salary_min is None
        assert first.salary_max is None
        assert second.salary_min == 85000.0

    @pytest.mark.asyncio
    async def test_search_by_keyword_maps_location(self, settings, upstream):
        upstream.routes[JOBICY_HOST] = jobicy_payload()
        source = JobicySource(settings, transport=upstream.transport)

        await source.search_by_keyword("python", "Berlin, Germany")

        params = upstream.calls[0].url.params
        assert params["tag"] == "python"
        assert params["geo"] == "europe"
        assert params["count"] == "30"

    @pytest.mark.parametrize(
        "location,geo",
        [
            ("United States", "usa"),
            ("Toronto, Canada", "canada"),
            ("London, UK", "europe"),
            ("Tokyo", None),
            (None, None),
        ],
    )
    def test_geo_for_location(self, location, geo):
        assert geo_for_location(location) == geo


class TestJoinriseSource:
    """Tests for the Joinrise connector."""

    @pytest.mark.asyncio
    async def test_request_and_pagination_metadata(self, settings, upstream):
        upstream.routes[JOINRISE_HOST] = joinrise_payload(joinrise_job(), total=120)
        source = JoinriseSource(settings, transport=upstream.transport)

        result = await source.search(JoinriseParams(q="analyst", page=2))

        params = upstream.calls[0].url.params
        assert params["q"] == "analyst"
        assert params["page"] == "2"
        assert params["limit"] == "20"
        assert params["sort"] == "desc"
        assert params["sortedBy"] == "createdAt"
        assert result.total == 120
        assert result.jobs[0].apply_url == "https://joinrise.io/jobs/jr-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("location,job_loc", [("remote friendly", "Remote"), ("Chicago, IL", "Chicago, IL")])
    async def test_search_by_keyword_location(self, settings, upstream, location, job_loc):
        upstream.routes[JOINRISE_HOST] = joinrise_payload()
        source = JoinriseSource(settings, transport=upstream.transport)

        await source.search_by_keyword("analyst", location)

        assert upstream.calls[0].url.params["jobLoc"] == job_loc


class TestAdzunaSource:
    """Tests for the Adzuna connector."""

    @pytest.mark.asyncio
    async def test_disabled_without_credentials(self, settings, upstream):
        source = AdzunaSource(settings, transport=upstream.transport)

        result = await source.search()

        assert source.enabled is False
        assert result.results == []
        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_non_numeric_salary_keeps_the_job(self, adzuna_settings, upstream):
        upstream.routes[ADZUNA_HOST] = adzuna_payload(adzuna_job(salary_min="n/a"))
        source = AdzunaSource(adzuna_settings, transport=upstream.transport)

        result = await source.search()

        assert [j.id for j in result.results] == ["4567"]
        assert result.results[0].salary_min is None
        assert result.results[0].salary_max == 125000.0

    @pytest.mark.asyncio
    async def test_request_path_and_auth(self, adzuna_settings, upstream):
        upstream.routes[ADZUNA_HOST] = adzuna_payload(adzuna_job())
        source = AdzunaSource(adzuna_settings, transport=upstream.transport)

        result = await source.search(AdzunaParams(what="python", country="GB", page=2))

        request = upstream.calls[0]
        assert request.url.path == "/v1/api/jobs/gb/search/2"
        assert request.url.params["app_id"] == "app-id"
        assert request.url.params["app_key"] == "app-key"
        assert request.url.params["what"] == "python"
        assert request.url.params["sort_by"] == "date"
        assert "country" not in request.url.params
        assert result.count == 1
        assert result.mean == 110000.0
        assert result.results[0].company.display_name == "Globex"

    @pytest.mark.asyncio
    async def test_country_is_part_of_cache_key(self, adzuna_settings, upstream):
        upstream.routes[ADZUNA_HOST] = adzuna_payload()
        source = AdzunaSource(adzuna_settings, transport=upstream.transport)

        await source.get_tech_jobs()
        await source.get_tech_jobs(country="gb")
        await source.get_tech_jobs()

        paths = [r.url.path for r in upstream.calls]
        assert paths == ["/v1/api/jobs/us/search/1", "/v1/api/jobs/gb/search/1"]
