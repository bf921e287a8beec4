"""
tests/unit/test_models.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for domain model validation (Pydantic).

Tests cover:
  • Required fields enforcement
  • camelCase aliases on input and output
  • Default values
  • MatchResponse.to_dict() serialisation
"""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from socmatch.domain.models import (
    ExternalMatch,
    MatchRequest,
    MatchResponse,
    MatchSource,
    OccupationEntry,
    ProgramQuery,
    ProgramSummary,
    ScoredMatch,
)


class TestMatchSource:
    def test_values(self):
        assert MatchSource.LOCAL.value == "local"
        assert MatchSource.AI.value == "ai"

    def test_from_string(self):
        assert MatchSource("ai") == MatchSource.AI


class TestOccupationEntry:
    def test_camel_case_input(self):
        e = OccupationEntry.model_validate(
            {"code": "15-1252", "title": "Software Developers", "majorGroup": "Computer"}
        )
        assert e.major_group == "Computer"

    def test_snake_case_input(self):
        e = OccupationEntry(code="15-1252", major_group="Computer")
        assert e.major_group == "Computer"

    def test_code_required(self):
        with pytest.raises(ValidationError):
            OccupationEntry(title="No code")  # type: ignore[call-arg]

    def test_blank_code_rejected(self):
        with pytest.raises(ValidationError):
            OccupationEntry(code="   ")

    def test_defaults_are_empty_strings(self):
        e = OccupationEntry(code="X")
        assert (e.title, e.major_group, e.minor_group, e.broad_group) == ("", "", "", "")

    def test_indexed_text(self):
        e = OccupationEntry(code="X", title="T", major_group="M", broad_group="B")
        assert e.indexed_text == "T M  B"

    def test_hashable_and_comparable(self):
        a = OccupationEntry(code="X", title="T")
        b = OccupationEntry(code="X", title="T")
        assert a == b
        assert len({a, b}) == 1


class TestProgramQuery:
    def test_all_optional(self):
        q = ProgramQuery()
        assert q.name is None
        assert q.display_name == ""

    def test_type_alias(self):
        q = ProgramQuery.model_validate({"type": "Bachelor", "longName": "Nursing"})
        assert q.program_type == "Bachelor"
        assert q.long_name == "Nursing"

    def test_display_name_prefers_long_name(self):
        assert ProgramQuery(name="CS", long_name="Computer Science").display_name == "Computer Science"
        assert ProgramQuery(name="CS").display_name == "CS"

    def test_numeric_fields_coerced(self):
        q = ProgramQuery.model_validate({"cipCode": 11.0701, "level": 300})
        assert q.cip_code == "11.0701"
        assert q.level == "300"

    def test_query_fields_order(self):
        q = ProgramQuery(name="n", long_name="l", program_type="t",
                         degree_designation="d", college="c", level="v")
        assert q.query_fields() == ["l", "n", "t", "d", "c", "v"]


class TestMatchRequest:
    def test_defaults(self):
        r = MatchRequest(program=ProgramQuery(name="x"))
        assert r.top_n == 10
        assert r.use_ai is False

    def test_wire_aliases(self):
        r = MatchRequest.model_validate(
            {"program": {"name": "Nursing"}, "topN": 3, "useAI": True}
        )
        assert r.top_n == 3
        assert r.use_ai is True

    def test_program_required(self):
        with pytest.raises(ValidationError):
            MatchRequest()  # type: ignore[call-arg]

    def test_top_n_upper_bound(self):
        with pytest.raises(ValidationError):
            MatchRequest(program=ProgramQuery(), top_n=1000)


class TestExternalMatch:
    def test_null_reason_becomes_empty(self):
        m = ExternalMatch.model_validate({"code": "15-1252", "title": None, "reason": None})
        assert m.title == ""
        assert m.reason == ""

    def test_code_required(self):
        with pytest.raises(ValidationError):
            ExternalMatch.model_validate({"title": "x"})


class TestMatchResponse:
    def _make_response(self) -> MatchResponse:
        return MatchResponse(
            program=ProgramSummary(name="Nursing", code="NURS-BSN", cip_code="51.3801"),
            local_matches=[
                ScoredMatch(code="29-1141", title="Registered Nurses",
                            major_group="Healthcare", relevance_score=12.77),
            ],
            ai_matches=None,
            ai_available=False,
        )

    def test_to_dict_camel_case_keys(self):
        d = self._make_response().to_dict()
        assert set(d) >= {"program", "localMatches", "aiMatches", "aiAvailable", "generatedAt"}
        assert d["program"]["cipCode"] == "51.3801"
        match = d["localMatches"][0]
        assert match["relevanceScore"] == 12.77
        assert match["majorGroup"] == "Healthcare"
        assert match["source"] == "local"

    def test_ai_matches_null_when_absent(self):
        assert self._make_response().to_dict()["aiMatches"] is None

    def test_to_dict_is_json_serialisable(self):
        serialised = json.dumps(self._make_response().to_dict())
        assert "29-1141" in serialised
