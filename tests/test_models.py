"""
Unit tests for the response models shared by every source.
"""

import pytest

from jobboard.models import AdzunaResponse, JobicyResponse, JoinriseResponse, SourceResponse, USAJobsResponse


class TestSourceResponse:
    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            SourceResponse()

    @pytest.mark.parametrize(
        "model,field_name",
        [
            (USAJobsResponse, "jobs"),
            (JobicyResponse, "jobs"),
            (JoinriseResponse, "jobs"),
            (AdzunaResponse, "results"),
        ],
    )
    def test_items_points_at_the_record_list(self, model, field_name):
        response = model(error="upstream down")
        assert response.items is getattr(response, field_name)
        assert response.ok is False
