import pytest

from autoprofiler.core.errors import OracleInvocationError, SqlRepairExhausted
from autoprofiler.pipeline.sql.repair import SqlOperation, repair_sql

from fakes import SQL_REPAIR_PROMPT, FakeModel, FakeOracle

BROKEN = "SELEC * FROM users;"
FIXED = "SELECT * FROM users;"


@pytest.mark.asyncio
async def test_valid_fragment_needs_no_model_call(oracle):
    model = FakeModel()

    result = await repair_sql(model, oracle, FIXED)

    assert result == FIXED
    assert model.calls == 0
    assert oracle.validate_calls == [FIXED]


@pytest.mark.asyncio
async def test_fixes_fragment_with_one_model_call():
    oracle = FakeOracle(invalid={BROKEN: "Line 1: unparsable section"})
    model = FakeModel(responses=[FIXED])

    result = await repair_sql(model, oracle, BROKEN)

    assert result == FIXED
    assert model.calls == 1
    assert oracle.validate_calls == [BROKEN, FIXED]

    prompt = model.prompts[0]
    assert prompt.startswith(SQL_REPAIR_PROMPT)
    assert BROKEN in prompt
    assert "Line 1: unparsable section" in prompt


@pytest.mark.asyncio
async def test_model_output_is_cleaned_before_recheck():
    oracle = FakeOracle(invalid={BROKEN: "bad"})
    model = FakeModel(responses=[f"<think>typo in SELECT</think>\n```sql\n{FIXED}\n```"])

    result = await repair_sql(model, oracle, BROKEN)

    assert result == FIXED
    assert oracle.validate_calls[-1] == FIXED


@pytest.mark.asyncio
async def test_exhaustion_reports_last_fragment_and_diagnostic():
    oracle = FakeOracle(invalid={BROKEN: "first", "SELEC 1;": "second"})
    model = FakeModel(handler=lambda prompt: "SELEC 1;")

    with pytest.raises(SqlRepairExhausted) as exc_info:
        await repair_sql(model, oracle, BROKEN)

    assert model.calls == 3
    assert exc_info.value.fragment == "SELEC 1;"
    assert exc_info.value.diagnostic == "second"
    assert exc_info.value.operation == "validate"


@pytest.mark.asyncio
async def test_each_round_uses_latest_diagnostic():
    oracle = FakeOracle(invalid={BROKEN: "first", "SELEC 1;": "second"})
    model = FakeModel(responses=["SELEC 1;", FIXED])

    result = await repair_sql(model, oracle, BROKEN)

    assert result == FIXED
    assert "first" in model.prompts[0]
    assert "second" in model.prompts[1]
    assert "SELEC 1;" in model.prompts[1]


@pytest.mark.asyncio
async def test_format_returns_canonical_text():
    oracle = FakeOracle(formatted={"select 1": "SELECT 1\n"})
    model = FakeModel()

    result = await repair_sql(model, oracle, "select 1", SqlOperation.FORMAT)

    assert result == "SELECT 1\n"
    assert oracle.format_calls == ["select 1"]
    assert oracle.validate_calls == []


@pytest.mark.asyncio
async def test_format_violation_is_repaired_then_formatted():
    oracle = FakeOracle(
        format_invalid={"select  1": "==== formatting violations ===="},
        formatted={"select 1": "SELECT 1\n"},
    )
    model = FakeModel(responses=["select 1"])

    result = await repair_sql(model, oracle, "select  1", SqlOperation.FORMAT)

    assert result == "SELECT 1\n"
    assert oracle.format_calls == ["select  1", "select 1"]


@pytest.mark.asyncio
async def test_format_exhaustion_names_operation():
    oracle = FakeOracle(format_invalid={"x": "violations"})
    model = FakeModel(handler=lambda prompt: "x")

    with pytest.raises(SqlRepairExhausted) as exc_info:
        await repair_sql(model, oracle, "x", SqlOperation.FORMAT, max_tries=2)

    assert model.calls == 2
    assert exc_info.value.operation == "format"


@pytest.mark.asyncio
async def test_linter_failure_during_repair_is_not_retried():
    oracle = FakeOracle(
        invalid={BROKEN: "bad"},
        broken={FIXED: OracleInvocationError("sqlfluff parse exited with code 2")},
    )
    model = FakeModel(responses=[FIXED])

    with pytest.raises(OracleInvocationError):
        await repair_sql(model, oracle, BROKEN)

    assert model.calls == 1
    assert oracle.validate_calls == [BROKEN, FIXED]
